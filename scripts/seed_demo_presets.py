"""
Seed the preset store with the reference loans shown in the calculators' help.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mortgage_tools.db.database import get_db_context, init_db
from mortgage_tools.services.presets import PresetData, PresetRepository

DEMO_PRESETS = [
    (
        "Reference loan ($600k, 5.59%)",
        "regular",
        {
            "price": 700000,
            "deposit": 100000,
            "rate": 5.59,
            "termYears": 30,
            "frequency": "monthly",
            "ageOfMortgage": "5",
        },
    ),
    (
        "First home ($400k, 5.59%)",
        "regular",
        {
            "price": 500000,
            "deposit": 100000,
            "rate": 5.59,
            "termYears": 30,
            "frequency": "monthly",
            "ageOfMortgage": "first",
        },
    ),
    (
        "Equal partners",
        "split",
        {
            "price": 700000,
            "person1Deposit": 50000,
            "person2Deposit": 50000,
            "person1RepaymentShare": 0.5,
            "rate": 5.59,
            "termYears": 30,
            "frequency": "fortnightly",
            "ageOfMortgage": "5",
            "salePrice": 800000,
        },
    ),
]


def main():
    init_db()

    with get_db_context() as db:
        repo = PresetRepository(db)
        existing = {p.name for p in repo.load_presets()}

        for name, preset_type, data in DEMO_PRESETS:
            if name in existing:
                print(f"Preset already exists: {name}. Skipping.")
                continue

            record = repo.save_preset(name, PresetData.model_validate(data), preset_type)
            print(f"Created {preset_type} preset: {record.name} (ID: {record.id})")


if __name__ == "__main__":
    main()
