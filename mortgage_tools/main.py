"""
Main FastAPI application entry point.

Serves the calculator form pages and the JSON API. Every form submission
recomputes the results in full from the submitted inputs.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from mortgage_tools.api import router as api_router
from mortgage_tools.api.calculations import (
    MortgageInput,
    SplitMortgageInput,
    run_mortgage,
    run_split_mortgage,
)
from mortgage_tools.api.presets import get_preset_repository
from mortgage_tools.calculations.amortization import (
    generate_amortization_schedule,
    summarize_by_year,
)
from mortgage_tools.calculations.point_in_time import PointInTime, PointInTimeKind
from mortgage_tools.config import get_settings
from mortgage_tools.constants import (
    DEFAULT_AGE_OF_MORTGAGE,
    DEFAULT_DEPOSIT,
    DEFAULT_FREQUENCY,
    DEFAULT_HOUSE_PRICE,
    DEFAULT_RATE,
    DEFAULT_REPAYMENT_SHARE,
    DEFAULT_TERM_YEARS,
    FREQUENCY_LABEL,
    INPUT_CONSTRAINTS,
    YEAR_OPTIONS,
)
from mortgage_tools.db.database import init_db
from mortgage_tools.services.presets import PresetData, PresetRepository
from mortgage_tools.utils.formatters import (
    fmt_currency,
    fmt_frequency,
    fmt_percent,
    fmt_rate,
    parse_input_number,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} started ({settings.app_env})")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Mortgage, split mortgage and sale proceeds calculators",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Mount static files
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "ui" / "static")), name="static")

# Set up templates
templates = Jinja2Templates(directory=str(BASE_DIR / "ui" / "templates"))
templates.env.filters["currency"] = lambda v: fmt_currency(v, settings.currency_symbol)
templates.env.filters["percent"] = fmt_percent
templates.env.filters["rate"] = fmt_rate
templates.env.filters["frequency"] = fmt_frequency

# Include API routes
app.include_router(api_router, prefix="/api")


def _age_form_value(point: PointInTime) -> str:
    """Select-box value for a point in time."""
    if point.kind != PointInTimeKind.year:
        return point.kind.value
    return f"{point.years:g}"


def _age_options(selected: str):
    options = list(YEAR_OPTIONS)
    if selected not in {o["value"] for o in options}:
        options.append({"value": selected, "label": f"Year {selected}"})
    return options


def _read_age(raw, errors: Dict[str, str]) -> str:
    try:
        return _age_form_value(PointInTime.parse(raw))
    except ValueError as e:
        errors["age_of_mortgage"] = str(e)
        return DEFAULT_AGE_OF_MORTGAGE


def _read_frequency(raw) -> str:
    value = getattr(raw, "value", raw)
    return value if value in FREQUENCY_LABEL else DEFAULT_FREQUENCY


def _number(params, name: str, default: float) -> float:
    raw = params.get(name)
    if raw is None or str(raw).strip() == "":
        return float(default)
    return parse_input_number(raw)


def _mortgage_form(params, preset: Optional[PresetData], errors: Dict[str, str]) -> dict:
    if preset is not None:
        return {
            "price": preset.price,
            "deposit": preset.deposit or 0.0,
            "rate": preset.rate,
            "term_years": preset.term_years,
            "frequency": _read_frequency(preset.frequency),
            "age_of_mortgage": _read_age(preset.age_of_mortgage, errors),
            "sale_price": preset.sale_price or 0.0,
        }
    return {
        "price": _number(params, "price", DEFAULT_HOUSE_PRICE),
        "deposit": _number(params, "deposit", DEFAULT_DEPOSIT),
        "rate": _number(params, "rate", DEFAULT_RATE),
        "term_years": _number(params, "term_years", DEFAULT_TERM_YEARS),
        "frequency": _read_frequency(params.get("frequency", DEFAULT_FREQUENCY)),
        "age_of_mortgage": _read_age(params.get("age_of_mortgage", DEFAULT_AGE_OF_MORTGAGE), errors),
        "sale_price": _number(params, "sale_price", 0),
    }


def _split_form(params, preset: Optional[PresetData], errors: Dict[str, str]) -> dict:
    if preset is not None:
        return {
            "price": preset.price,
            "person1_deposit": preset.person1_deposit or 0.0,
            "person2_deposit": preset.person2_deposit or 0.0,
            "person1_repayment_share": (
                DEFAULT_REPAYMENT_SHARE
                if preset.person1_repayment_share is None
                else preset.person1_repayment_share
            ),
            "rate": preset.rate,
            "term_years": preset.term_years,
            "frequency": _read_frequency(preset.frequency),
            "age_of_mortgage": _read_age(preset.age_of_mortgage, errors),
            "sale_price": preset.sale_price or 0.0,
        }
    return {
        "price": _number(params, "price", DEFAULT_HOUSE_PRICE),
        "person1_deposit": _number(params, "person1_deposit", DEFAULT_DEPOSIT / 2),
        "person2_deposit": _number(params, "person2_deposit", DEFAULT_DEPOSIT / 2),
        "person1_repayment_share": _number(
            params, "person1_repayment_share", DEFAULT_REPAYMENT_SHARE
        ),
        "rate": _number(params, "rate", DEFAULT_RATE),
        "term_years": _number(params, "term_years", DEFAULT_TERM_YEARS),
        "frequency": _read_frequency(params.get("frequency", DEFAULT_FREQUENCY)),
        "age_of_mortgage": _read_age(params.get("age_of_mortgage", DEFAULT_AGE_OF_MORTGAGE), errors),
        "sale_price": _number(params, "sale_price", 0),
    }


def _load_preset(repo: PresetRepository, preset_id: Optional[str]) -> Optional[PresetData]:
    if not preset_id:
        return None
    record = repo.get_preset(preset_id)
    if not record:
        raise HTTPException(status_code=404, detail="Preset not found")
    return record.data


def _page_context(form: dict, preset_type: str, repo: PresetRepository) -> dict:
    return {
        "title": settings.app_name,
        "form": form,
        "frequency_labels": FREQUENCY_LABEL,
        "age_options": _age_options(form["age_of_mortgage"]),
        "constraints": INPUT_CONSTRAINTS,
        "presets": repo.load_presets(preset_type),
        "preset_type": preset_type,
    }


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Render the calculator index."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": settings.app_name},
    )


@app.get("/calculators/mortgage", response_class=HTMLResponse)
async def mortgage_page(
    request: Request,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Render the mortgage calculator with results for the submitted inputs."""
    errors: Dict[str, str] = {}
    preset = _load_preset(repo, request.query_params.get("preset"))
    form = _mortgage_form(request.query_params, preset, errors)

    response = run_mortgage(MortgageInput(**form))
    errors.update(response.validation_errors)

    annual_summary = []
    if request.query_params.get("show_schedule") == "1":
        annual_summary = summarize_by_year(
            generate_amortization_schedule(
                response.results.loan_amount,
                form["rate"],
                form["term_years"],
                form["frequency"],
            )
        )

    context = _page_context(form, "regular", repo)
    context.update(
        {
            "response": response,
            "errors": errors,
            "annual_summary": annual_summary,
            "total_equity": response.sale.total_equity,
        }
    )
    return templates.TemplateResponse(request, "mortgage.html", context)


@app.get("/calculators/split-mortgage", response_class=HTMLResponse)
async def split_mortgage_page(
    request: Request,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Render the split mortgage calculator with results for the submitted inputs."""
    errors: Dict[str, str] = {}
    preset = _load_preset(repo, request.query_params.get("preset"))
    form = _split_form(request.query_params, preset, errors)

    response = run_split_mortgage(SplitMortgageInput(**form))
    errors.update(response.validation_errors)

    context = _page_context(form, "split", repo)
    context.update({"response": response, "errors": errors})
    return templates.TemplateResponse(request, "split_mortgage.html", context)


@app.post("/calculators/presets")
async def save_preset_from_form(
    request: Request,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Save the current form inputs as a preset and reload the calculator with it."""
    params = await request.form()
    preset_type = params.get("preset_type", "regular")
    errors: Dict[str, str] = {}

    if preset_type == "split":
        form = _split_form(params, None, errors)
        page = "split-mortgage"
    else:
        form = _mortgage_form(params, None, errors)
        page = "mortgage"

    try:
        record = repo.save_preset(str(params.get("name", "")), PresetData(**form), preset_type)
    except ValueError as e:
        logger.warning(f"Rejected preset form: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return RedirectResponse(f"/calculators/{page}?preset={record.id}", status_code=303)


@app.post("/calculators/presets/{preset_id}/delete")
async def delete_preset_from_form(
    preset_id: str,
    request: Request,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Delete a preset and return to the calculator."""
    params = await request.form()
    page = "split-mortgage" if params.get("preset_type") == "split" else "mortgage"
    repo.delete_preset(preset_id)
    return RedirectResponse(f"/calculators/{page}", status_code=303)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mortgage_tools.main:app", host=settings.host, port=settings.port, reload=settings.debug)
