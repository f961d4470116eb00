"""
Static catalogue of EV models and their usable battery capacity.

Used to pre-fill the battery capacity in settings.
"""

from collections import OrderedDict
from typing import Dict, List

BODY_TYPES = ("sedan", "suv", "truck", "hatchback")


def _model(id, make, model, capacity, type, trim=None):
    return {
        "id": id,
        "make": make,
        "model": model,
        "trim": trim,
        "capacity": capacity,
        "type": type,
    }


EV_DATABASE: List[dict] = [
    # Tesla
    _model("tesla-m3-rwd", "Tesla", "Model 3", 57.5, "sedan", trim="RWD (LFP)"),
    _model("tesla-m3-lr", "Tesla", "Model 3", 75.0, "sedan", trim="Long Range / Perf"),
    _model("tesla-my-rwd", "Tesla", "Model Y", 60.0, "suv", trim="RWD"),
    _model("tesla-my-lr", "Tesla", "Model Y", 75.0, "suv", trim="Long Range / Perf"),
    _model("tesla-ms-lr", "Tesla", "Model S", 100.0, "sedan", trim="Long Range"),
    _model("tesla-mx-lr", "Tesla", "Model X", 100.0, "suv", trim="Long Range"),
    _model("tesla-ct", "Tesla", "Cybertruck", 123.0, "truck", trim="AWD"),
    # Hyundai / Kia
    _model("hyundai-ioniq5-lr", "Hyundai", "Ioniq 5", 77.4, "suv", trim="Long Range"),
    _model("hyundai-ioniq5-sr", "Hyundai", "Ioniq 5", 58.0, "suv", trim="Standard Range"),
    _model("hyundai-ioniq6-lr", "Hyundai", "Ioniq 6", 77.4, "sedan", trim="Long Range"),
    _model("kia-ev6-lr", "Kia", "EV6", 77.4, "suv", trim="Long Range"),
    _model("kia-ev9-lr", "Kia", "EV9", 99.8, "suv", trim="Long Range"),
    # Ford
    _model("ford-mache-ext", "Ford", "Mustang Mach-E", 91.0, "suv", trim="Extended Range"),
    _model("ford-mache-std", "Ford", "Mustang Mach-E", 72.0, "suv", trim="Standard Range"),
    _model("ford-f150-ext", "Ford", "F-150 Lightning", 131.0, "truck", trim="Extended Range"),
    _model("ford-f150-std", "Ford", "F-150 Lightning", 98.0, "truck", trim="Standard Range"),
    # Nissan
    _model("nissan-leaf-40", "Nissan", "Leaf", 40.0, "hatchback", trim="40 kWh"),
    _model("nissan-leaf-62", "Nissan", "Leaf e+", 62.0, "hatchback", trim="62 kWh"),
    _model("nissan-ariya-87", "Nissan", "Ariya", 87.0, "suv", trim="87 kWh"),
    # VW / Audi / Porsche
    _model("vw-id4-pro", "Volkswagen", "ID.4", 82.0, "suv", trim="Pro"),
    _model("vw-id4-std", "Volkswagen", "ID.4", 62.0, "suv", trim="Standard"),
    _model("audi-etron-gt", "Audi", "e-tron GT", 93.4, "sedan"),
    _model("porsche-taycan-perf", "Porsche", "Taycan", 93.4, "sedan", trim="Perf Battery Plus"),
    # Rivian
    _model("rivian-r1t-large", "Rivian", "R1T", 135.0, "truck", trim="Large Pack"),
    _model("rivian-r1s-large", "Rivian", "R1S", 135.0, "suv", trim="Large Pack"),
    # Chevrolet
    _model("chevy-bolt", "Chevrolet", "Bolt EV/EUV", 66.0, "hatchback"),
    _model("chevy-blazer", "Chevrolet", "Blazer EV", 85.0, "suv", trim="RS AWD"),
    # BMW
    _model("bmw-i4-e40", "BMW", "i4", 80.7, "sedan", trim="eDrive40"),
    _model("bmw-ix-50", "BMW", "iX", 105.2, "suv", trim="xDrive50"),
]


def grouped_by_make() -> Dict[str, List[dict]]:
    """Catalogue grouped by make, makes in catalogue order."""
    groups: Dict[str, List[dict]] = OrderedDict()
    for entry in EV_DATABASE:
        groups.setdefault(entry["make"], []).append(entry)
    return groups


def find_model(model_id: str):
    for entry in EV_DATABASE:
        if entry["id"] == model_id:
            return entry
    return None
