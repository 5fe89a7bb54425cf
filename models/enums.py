"""
Enumerations and reference data for SWAT readiness scoring.

This module defines the fixed category lists, legacy mappings and thresholds
used by the classification, resolution and report scoring logic.
"""

from enum import Enum
from typing import Dict, List, Tuple


class QuestionType(str, Enum):
    """Answer type of a question; selects which response field holds the value."""
    BOOLEAN = "boolean"
    TEXT = "text"
    NUMERIC = "numeric"
    SELECT = "select"


class AssessmentStatus(str, Enum):
    """Lifecycle status of an assessment."""
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ReportType(str, Enum):
    """The two report types generated from an assessment."""
    TIER_ASSESSMENT = "tier-assessment"
    GAP_ANALYSIS = "gap-analysis"


class AssessmentGroup(str, Enum):
    """Questionnaire a category belongs to."""
    TIER = "tier"
    GAP = "gap"


# Tier Assessment categories (16), in questionnaire order
TIER_CATEGORY_NAMES: List[str] = [
    "Personnel & Leadership",
    "Mission Profiles",
    "Individual Operator Equipment",
    "Sniper Equipment & Operations",
    "Breaching Operations",
    "Access & Elevated Tactics",
    "Less-Lethal Capabilities",
    "Noise Flash Diversionary Devices (NFDDs)",
    "Chemical Munitions",
    "K9 Operations & Integration",
    "Explosive Ordnance Disposal (EOD) Support",
    "Mobility/Transportation & Armor Support",
    "Unique Environment & Technical Capabilities",
    "SCBA & HAZMAT Capabilities",
    "Tactical Emergency Medical Support (TEMS)",
    "Negotiations & Crisis Response",
]

# Gap Analysis categories (8)
GAP_CATEGORY_NAMES: List[str] = [
    "Team Structure and Chain of Command",
    "Supervisor-to-Operator Ratio",
    "Span of Control Adjustments for Complex Operations",
    "Training and Evaluation of Leadership",
    "Equipment Procurement and Allocation",
    "Equipment Maintenance and Inspection",
    "Equipment Inventory Management",
    "Standard Operating Guidelines (SOGs)",
]

# Legacy display names -> canonical name.
# A literal canonical name always wins over this table.
CATEGORY_SYNONYMS: Dict[str, str] = {
    "Mission Capabilities & Training": "Mission Profiles",
    "Team Composition & Structure": "Personnel & Leadership",
    "Tier 1-4 Metrics (Personnel & Leadership)": "Personnel & Leadership",
    "Breaching Capabilities": "Breaching Operations",
    "Mobility, Transportation & Armor Support": "Mobility/Transportation & Armor Support",
    "SCBA & HAZMAT Equipment": "SCBA & HAZMAT Capabilities",
    "Tactical Medical Support": "Tactical Emergency Medical Support (TEMS)",
}

# Category id -> alternate category ids left behind by earlier re-seeds of
# the question catalog. Questions filed under any of these ids belong to the
# keyed category.
CATEGORY_ID_EQUIVALENTS: Dict[str, List[str]] = {
    # Personnel & Leadership
    "c1411a75-599f-49cf-a8b2-65e17db5f9ba": [
        "906a6bbb-4d4c-4960-9bd3-74f64089b2b2",  # Team Composition & Structure
        "e4442078-a293-4840-b993-6b76837cca20",
        "21a30524-a80b-4d6c-a23c-4ebd4714e451",
        "835844cf-903e-4370-9ec2-ca6622b43250",
        "ffe43a49-30f4-4e3a-9a11-7f4241ce6bbd",
        "bc7a7c3d-9aac-4809-b055-f008524ea784",
        "a8f396e3-59d6-434c-8710-a0418cc100ff",  # Specialized Roles
    ],
    # Mission Profiles
    "3f137fcf-33c0-4d97-a4a4-7db2c28fc1c8": [
        "c8f1d7d1-a70b-46ac-8060-00d6428c4f85",  # Mission Capabilities & Training
        "a88d5534-0d87-468e-a361-1f94c9b13651",
    ],
    # Individual Operator Equipment
    "dbb503ba-0683-49a5-8de7-03f4603773b6": [
        "1db3fb40-5247-4d07-9408-63c5af333bb3",
        "e0663c8c-1b37-4e8e-afec-3f833634a1d6",
        "6306d310-3c76-41d7-a45f-fed538e73fd0",
        "1b236b8a-0aeb-48e5-bb56-bfc0e87bb278",
    ],
    # Sniper Equipment & Operations
    "f3f0d9c4-d9fd-42e0-8df8-94e5bf93a1e5": [
        "a272f7a1-32bf-45e2-8083-79224e1fc5f3",
    ],
    # Breaching Operations
    "9420533e-af40-478c-8b8e-65b08e1f31ab": [
        "df55fded-87cf-458b-8790-21cc42d86cce",  # Breaching Capabilities
    ],
    # Access & Elevated Tactics
    "1597467a-612f-437a-9de7-e86f9529cf6f": [
        "5b9276a1-d646-4e88-9d1c-82bd0bfd8a86",
    ],
    # Unique Environment & Technical Capabilities
    "0d05ec4d-902f-4582-bf92-aae31017a4e6": [
        "5694e619-097b-4245-9083-fe6f56623366",  # Surveillance & Intelligence
        "e5fb4ff5-77ae-49d8-908f-67819feeda2a",  # Video & Photography
    ],
    # SCBA & HAZMAT Capabilities
    "c8d87078-a85b-4f20-b681-d26223ff2ca8": [
        "cc2b59bd-8008-40a1-9d2d-94a868d8d851",  # SCBA & HAZMAT Equipment
    ],
    # Tactical Emergency Medical Support (TEMS)
    "74b73cd8-b277-485f-b5c7-d84ee4ff2a26": [
        "3f687dee-a05d-4d0e-9408-0f2aaf5089e1",  # Tactical Medical Support
    ],
}

# Content keywords per canonical category name (lowercase substrings)
CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "Personnel & Leadership": ["personnel", "leadership", "member", "team", "commander", "leader"],
    "Mission Profiles": ["mission", "profiles", "capabilities", "operational"],
    "Individual Operator Equipment": ["equipment", "gear", "operator", "individual"],
    "Sniper Equipment & Operations": ["sniper", "precision", "rifle", "marksman"],
    "Breaching Operations": ["breach", "entry", "door", "forcible", "mechanical", "explosive"],
    "Access & Elevated Tactics": ["access", "elevation", "height", "rope", "tactical", "entry"],
    "Less-Lethal Capabilities": ["less-lethal", "less lethal", "non-lethal", "taser", "bean bag"],
    "Noise Flash Diversionary Devices (NFDDs)": ["noise", "flash", "diversionary", "nfdd", "flash-bang", "flashbang"],
    "Chemical Munitions": ["chemical", "munitions", "cs", "oc", "smoke", "gas"],
    "K9 Operations & Integration": ["k9", "canine", "dog", "handler"],
    "Explosive Ordnance Disposal (EOD) Support": ["explosive", "ordnance", "disposal", "eod", "bomb"],
    "Mobility/Transportation & Armor Support": ["mobility", "transportation", "armor", "vehicle", "armored"],
    "Unique Environment & Technical Capabilities": ["unique", "environment", "technical", "specialized", "water", "maritime", "rural"],
    "SCBA & HAZMAT Capabilities": ["scba", "hazmat", "hazardous", "breathing", "apparatus", "respirator"],
    "Tactical Emergency Medical Support (TEMS)": ["medical", "tems", "tactical emergency", "medic", "paramedic", "first aid"],
    "Negotiations & Crisis Response": ["negotiation", "crisis", "response", "hostage", "barricade", "negotiator"],
}

# Tier thresholds on the share of tier-impacting questions answered "Yes"
# (minimum percentage, tier level). Anything below the last row is Tier 4.
TIER_THRESHOLDS: List[Tuple[int, int]] = [
    (90, 1),
    (75, 2),
    (50, 3),
]
LOWEST_TIER_LEVEL = 4

# Number of unmet questions listed as recommendations in a tier report
MAX_RECOMMENDATIONS = 3

# Response text when no typed value is present
NOT_SPECIFIED = "Not specified"

# Report titles and filename prefixes
REPORT_TITLES = {
    ReportType.TIER_ASSESSMENT: "SWAT TIER LEVEL ASSESSMENT REPORT",
    ReportType.GAP_ANALYSIS: "SWAT GAP ANALYSIS REPORT",
}
REPORT_FILENAME_PREFIXES = {
    ReportType.TIER_ASSESSMENT: "TierAssessment",
    ReportType.GAP_ANALYSIS: "GapAnalysis",
}
