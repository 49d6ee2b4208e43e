from __future__ import annotations

from typing import Dict, List, Optional, Tuple

GYM = "gym"
DUMBBELLS = "dumbbells"
BODYWEIGHT = "bodyweight"

EQUIPMENT_ACCESS = {
    GYM: {GYM, DUMBBELLS, BODYWEIGHT},
    DUMBBELLS: {DUMBBELLS, BODYWEIGHT},
    BODYWEIGHT: {BODYWEIGHT},
}

CHEST = "CHEST"
BACK = "BACK"
SHOULDERS = "SHOULDERS"
BICEPS = "BICEPS"
TRICEPS = "TRICEPS"
QUADS = "QUADS"
HAMSTRINGS = "HAMSTRINGS"
GLUTES = "GLUTES"
CALVES = "CALVES"
CORE = "CORE"

EXERCISE_BANK: Dict[str, List[Tuple[str, str]]] = {
    CHEST: [
        ("Flat bench press", GYM),
        ("Incline bench press", GYM),
        ("Machine chest press", GYM),
        ("Cable fly", GYM),
        ("Pec deck", GYM),
        ("Dumbbell bench press", DUMBBELLS),
        ("Incline dumbbell press", DUMBBELLS),
        ("Dumbbell fly", DUMBBELLS),
        ("Dumbbell floor press", DUMBBELLS),
        ("Push-up", BODYWEIGHT),
        ("Incline push-up", BODYWEIGHT),
        ("Decline push-up", BODYWEIGHT),
        ("Wide push-up", BODYWEIGHT),
        ("Archer push-up", BODYWEIGHT),
    ],
    BACK: [
        ("Barbell row", GYM),
        ("Lat pulldown", GYM),
        ("Seated cable row", GYM),
        ("T-bar row", GYM),
        ("Straight-arm pulldown", GYM),
        ("One-arm dumbbell row", DUMBBELLS),
        ("Chest-supported dumbbell row", DUMBBELLS),
        ("Dumbbell pullover", DUMBBELLS),
        ("Dumbbell shrug", DUMBBELLS),
        ("Pull-up", BODYWEIGHT),
        ("Inverted row", BODYWEIGHT),
        ("Doorframe row", BODYWEIGHT),
        ("Superman raise", BODYWEIGHT),
        ("Prone Y-T-W raise", BODYWEIGHT),
    ],
    SHOULDERS: [
        ("Overhead press", GYM),
        ("Machine shoulder press", GYM),
        ("Cable lateral raise", GYM),
        ("Face pull", GYM),
        ("Reverse pec deck", GYM),
        ("Seated dumbbell press", DUMBBELLS),
        ("Arnold press", DUMBBELLS),
        ("Lateral raise", DUMBBELLS),
        ("Rear delt fly", DUMBBELLS),
        ("Front raise", DUMBBELLS),
        ("Pike push-up", BODYWEIGHT),
        ("Wall walk", BODYWEIGHT),
        ("Plank shoulder tap", BODYWEIGHT),
        ("Prone Y raise", BODYWEIGHT),
    ],
    BICEPS: [
        ("Barbell curl", GYM),
        ("Cable curl", GYM),
        ("Preacher curl", GYM),
        ("EZ-bar curl", GYM),
        ("Dumbbell curl", DUMBBELLS),
        ("Hammer curl", DUMBBELLS),
        ("Incline dumbbell curl", DUMBBELLS),
        ("Concentration curl", DUMBBELLS),
        ("Chin-up", BODYWEIGHT),
        ("Towel curl", BODYWEIGHT),
        ("Underhand inverted row", BODYWEIGHT),
        ("Doorframe biceps curl", BODYWEIGHT),
    ],
    TRICEPS: [
        ("Triceps pushdown", GYM),
        ("Close-grip bench press", GYM),
        ("Overhead cable extension", GYM),
        ("Skull crusher", GYM),
        ("Overhead dumbbell extension", DUMBBELLS),
        ("Dumbbell kickback", DUMBBELLS),
        ("Dumbbell skull crusher", DUMBBELLS),
        ("Bench dip", BODYWEIGHT),
        ("Diamond push-up", BODYWEIGHT),
        ("Close-grip push-up", BODYWEIGHT),
        ("Bodyweight triceps extension", BODYWEIGHT),
    ],
    QUADS: [
        ("Back squat", GYM),
        ("Front squat", GYM),
        ("Leg press", GYM),
        ("Hack squat", GYM),
        ("Leg extension", GYM),
        ("Goblet squat", DUMBBELLS),
        ("Dumbbell split squat", DUMBBELLS),
        ("Dumbbell step-up", DUMBBELLS),
        ("Dumbbell walking lunge", DUMBBELLS),
        ("Bodyweight squat", BODYWEIGHT),
        ("Bulgarian split squat", BODYWEIGHT),
        ("Reverse lunge", BODYWEIGHT),
        ("Step-up", BODYWEIGHT),
        ("Jump squat", BODYWEIGHT),
    ],
    HAMSTRINGS: [
        ("Romanian deadlift", GYM),
        ("Conventional deadlift", GYM),
        ("Lying leg curl", GYM),
        ("Seated leg curl", GYM),
        ("Good morning", GYM),
        ("Dumbbell Romanian deadlift", DUMBBELLS),
        ("Single-leg dumbbell deadlift", DUMBBELLS),
        ("Nordic curl", BODYWEIGHT),
        ("Sliding leg curl", BODYWEIGHT),
        ("Single-leg Romanian deadlift", BODYWEIGHT),
        ("Hamstring walkout", BODYWEIGHT),
    ],
    GLUTES: [
        ("Barbell hip thrust", GYM),
        ("Cable kickback", GYM),
        ("Hip abduction machine", GYM),
        ("Cable pull-through", GYM),
        ("Dumbbell hip thrust", DUMBBELLS),
        ("Dumbbell sumo squat", DUMBBELLS),
        ("Dumbbell curtsy lunge", DUMBBELLS),
        ("Glute bridge", BODYWEIGHT),
        ("Single-leg glute bridge", BODYWEIGHT),
        ("Donkey kick", BODYWEIGHT),
        ("Fire hydrant", BODYWEIGHT),
        ("Frog pump", BODYWEIGHT),
    ],
    CALVES: [
        ("Standing calf raise machine", GYM),
        ("Seated calf raise", GYM),
        ("Smith machine calf raise", GYM),
        ("Dumbbell calf raise", DUMBBELLS),
        ("Single-leg calf raise", BODYWEIGHT),
        ("Bodyweight calf raise", BODYWEIGHT),
        ("Wall tibialis raise", BODYWEIGHT),
    ],
    CORE: [
        ("Cable crunch", GYM),
        ("Hanging knee raise", GYM),
        ("Ab wheel rollout", GYM),
        ("Dumbbell side bend", DUMBBELLS),
        ("Dumbbell dead bug", DUMBBELLS),
        ("Dead bug", BODYWEIGHT),
        ("Bicycle crunch", BODYWEIGHT),
        ("Mountain climber", BODYWEIGHT),
        ("Bird dog", BODYWEIGHT),
        ("Reverse crunch", BODYWEIGHT),
        ("Lying leg raise", BODYWEIGHT),
    ],
}

# Each day type lists eight category slots; a day uses the first N of them.
DAY_TEMPLATES: Dict[str, List[str]] = {
    "PUSH": [CHEST, SHOULDERS, CHEST, TRICEPS, SHOULDERS, TRICEPS, CORE, CHEST],
    "PULL": [BACK, BACK, BICEPS, SHOULDERS, BACK, BICEPS, CORE, BICEPS],
    "LEGS": [QUADS, HAMSTRINGS, GLUTES, QUADS, CALVES, HAMSTRINGS, CORE, GLUTES],
    "UPPER": [CHEST, BACK, SHOULDERS, BACK, CHEST, BICEPS, TRICEPS, CORE],
    "LOWER": [QUADS, HAMSTRINGS, GLUTES, CALVES, QUADS, CORE, HAMSTRINGS, GLUTES],
    "FULL": [QUADS, CHEST, BACK, HAMSTRINGS, SHOULDERS, CORE, GLUTES, BICEPS],
    "GLUTES": [GLUTES, HAMSTRINGS, GLUTES, QUADS, HAMSTRINGS, GLUTES, CORE, CALVES],
}

LEG_DAY_TYPES = {"LEGS", "LOWER", "GLUTES"}

DAY_TYPE_LABELS = {
    "pl": {
        "PUSH": "Push",
        "PULL": "Pull",
        "LEGS": "Nogi",
        "UPPER": "Góra",
        "LOWER": "Dół",
        "FULL": "Całe ciało",
        "GLUTES": "Pośladki i tył uda",
    },
    "en": {
        "PUSH": "Push",
        "PULL": "Pull",
        "LEGS": "Legs",
        "UPPER": "Upper body",
        "LOWER": "Lower body",
        "FULL": "Full body",
        "GLUTES": "Glutes & hamstrings",
    },
}


def exercises_for(category: str, equipment: str) -> List[str]:
    allowed = EQUIPMENT_ACCESS.get(equipment, EQUIPMENT_ACCESS[GYM])
    return [name for name, tag in EXERCISE_BANK[category] if tag in allowed]


def allowed_vocabulary() -> List[str]:
    return [name for entries in EXERCISE_BANK.values() for name, _ in entries]


def _vocabulary_key(name: str) -> str:
    return " ".join(name.lower().replace("–", "-").split())


_CANONICAL = {_vocabulary_key(name): name for name in allowed_vocabulary()}


def canonical_name(name: str) -> Optional[str]:
    return _CANONICAL.get(_vocabulary_key(name or ""))


def day_type_label(day_type: str, lang: str = "pl") -> str:
    return DAY_TYPE_LABELS.get(lang, DAY_TYPE_LABELS["pl"]).get(day_type, day_type.title())
