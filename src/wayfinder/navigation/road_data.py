# road_data.py
# Seed road conditions and speed cameras for Nairobi.
# Factories return fresh lists so every session starts from the same data.

from typing import List

from .models import CameraType, Coord, RoadCondition, RoadConditionType, Severity, SpeedCamera


# (id, type, lat, lng, name, description, severity, verified)
_CONDITIONS = [
    ("murram-1", "murram", -1.2450, 36.8750, "Ruaka Road Section",
     "Unpaved murram section - 500m stretch, dusty conditions", "medium", True),
    ("murram-2", "murram", -1.3100, 36.7500, "Ngong Forest Edge",
     "Murram road near forest entry - slow down advised", "low", True),
    ("murram-3", "murram", -1.2200, 36.8900, "Kahawa West Access",
     "Rough murram - suitable for 4x4 vehicles only", "high", True),
    ("murram-4", "murram", -1.3350, 36.7800, "Karen Plains Road",
     "Seasonal murram road - passable in dry weather", "medium", True),
    ("construction-1", "construction", -1.2750, 36.8100, "Westlands Flyover Project",
     "Major construction - expect 15-20 min delays", "high", True),
    ("construction-2", "construction", -1.2980, 36.7850, "Ngong Road Expansion",
     "Road widening in progress - single lane traffic", "medium", True),
    ("construction-3", "construction", -1.2600, 36.8400, "Parklands Drainage Works",
     "Drainage installation - partial road closure", "medium", True),
    ("construction-4", "construction", -1.3050, 36.8600, "Industrial Area Upgrade",
     "Road resurfacing - heavy machinery present", "low", True),
    ("pothole-1", "pothole", -1.2850, 36.8250, "Kenyatta Avenue Section",
     "Multiple potholes - drive carefully", "medium", True),
    ("flooded-1", "flooded", -1.2700, 36.8550, "Mathare Valley Crossing",
     "Floods during heavy rain - check conditions first", "high", False),
]

# (id, lat, lng, name, speed limit kph, type, direction)
_CAMERAS = [
    ("cam-1", -1.3150, 36.8500, "Mombasa Road - Nyayo Stadium", 50, "fixed", "Both directions"),
    ("cam-2", -1.3080, 36.8400, "Mombasa Road - Bellevue", 50, "fixed", "City-bound"),
    ("cam-3", -1.2920, 36.8200, "Uhuru Highway - Nyayo House", 50, "fixed", "Both directions"),
    ("cam-4", -1.2850, 36.8150, "Uhuru Highway - Kenyatta Ave", 50, "fixed", "Westlands-bound"),
    ("cam-5", -1.2400, 36.8600, "Thika Road - Muthaiga", 80, "fixed", "Both directions"),
    ("cam-6", -1.2200, 36.8750, "Thika Road - Kasarani", 80, "average", "City-bound"),
    ("cam-7", -1.2050, 36.8850, "Thika Road - Roysambu", 80, "fixed", "Both directions"),
    ("cam-8", -1.2650, 36.8000, "Waiyaki Way - Westlands", 50, "fixed", "City-bound"),
    ("cam-9", -1.2580, 36.7850, "Waiyaki Way - ABC Place", 50, "mobile", "Variable"),
    ("cam-10", -1.2970, 36.7950, "Ngong Road - Prestige Plaza", 50, "fixed", "Both directions"),
    ("cam-11", -1.3050, 36.7800, "Ngong Road - Junction Mall", 50, "fixed", "Karen-bound"),
    ("cam-12", -1.3100, 36.8050, "Langata Road - Carnivore", 50, "fixed", "Both directions"),
    ("cam-13", -1.3000, 36.8300, "Expressway - Haile Selassie", 100, "average", "Both directions"),
    ("cam-14", -1.2750, 36.7950, "Expressway - Westlands Exit", 80, "fixed", "Exit ramp"),
    ("cam-15", -1.2550, 36.8700, "Outer Ring - Allsops", 50, "mobile", "Variable"),
]


def default_road_conditions() -> List[RoadCondition]:
    """Known hazards (murram, construction, potholes, flooding)."""
    return [
        RoadCondition(
            id=cid,
            type=RoadConditionType(ctype),
            location=Coord(lat, lng),
            name=name,
            description=description,
            severity=Severity(severity),
            verified=verified,
        )
        for cid, ctype, lat, lng, name, description, severity, verified in _CONDITIONS
    ]


def default_speed_cameras() -> List[SpeedCamera]:
    """Known enforcement points, all active."""
    return [
        SpeedCamera(
            id=cid,
            location=Coord(lat, lng),
            name=name,
            speed_limit_kph=limit,
            type=CameraType(ctype),
            direction=direction,
        )
        for cid, lat, lng, name, limit, ctype, direction in _CAMERAS
    ]
