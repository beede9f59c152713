"""Risk assessment and review checklists for changed files.

Risk is judged twice: once from the file path, once from the changed lines.
The content verdict can only raise the path verdict, never lower it.
"""

import re
from enum import IntEnum
from typing import Dict, List, Sequence

from ..diff.models import ChangeType


class RiskLevel(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


_I = re.IGNORECASE

# Content patterns, grouped by tier then category. Only the tier matters
# for the verdict; categories document intent.
RISK_PATTERNS: Dict[RiskLevel, Dict[str, List["re.Pattern[str]"]]] = {
    RiskLevel.HIGH: {
        "security": [
            re.compile(r"auth|login|logout|permission|role|credential|session|token|jwt|oauth|password|secret|key", _I),
            re.compile(r"encrypt|decrypt|hash|salt|cipher|ssl|tls|https?", _I),
            re.compile(r"delete.*from|drop.*table|truncate|update.*set|insert.*into", _I),
            re.compile(r"(select|update|delete).*where", _I),
            re.compile(r"api.*key|bearer|basic.*auth|cors|csrf|xss|sanitize", _I),
            re.compile(r"upload|download|file.*stream|readFile|writeFile|unlink|rmdir", _I),
            re.compile(r"env|config|setting|process\.env|dotenv", _I),
            re.compile(r"payment|credit.*card|stripe|paypal|billing|invoice", _I),
        ],
        "data_flow": [
            re.compile(r"store|reducer|action|dispatch|commit|state\.", _I),
            re.compile(r"parse|stringify|transform|convert|migrate", _I),
            re.compile(r"cache|redis|memcached|invalidate", _I),
            re.compile(r"transaction|commit|rollback|lock|deadlock", _I),
            re.compile(r"async|await|promise|callback|observable|subscribe", _I),
        ],
        "infrastructure": [
            re.compile(r"server|cluster|docker|kubernetes|deployment|nginx|apache", _I),
            re.compile(r"database|connection|pool|replica|shard", _I),
            re.compile(r"http|socket|tcp|udp|port|dns|proxy", _I),
        ],
    },
    RiskLevel.MEDIUM: {
        "code_quality": [
            re.compile(r"function.*\([^)]{50,}\)"),  # long parameter lists
            re.compile(r"\b(while|for)\b.*\b(while|for)\b"),  # nested loops
            re.compile(r"(if|switch).*\b(if|switch)\b"),  # nested conditionals
            re.compile(r"\b(TODO|FIXME|HACK|XXX|BUG|OPTIMIZE)\b", _I),
            re.compile(r"try|catch|throw|error|exception|finally", _I),
            re.compile(r"memory|leak|garbage|collect|dispose|cleanup", _I),
        ],
        "user_experience": [
            re.compile(r"route|navigation|redirect|history|link", _I),
            re.compile(r"loading|error|success|disabled|enabled|active|inactive", _I),
            re.compile(r"form|validation|input|submit|reset|onChange|onSubmit", _I),
            re.compile(r"click|submit|change|focus|blur|keyup|keydown|mouseup|mousedown", _I),
        ],
        "data_management": [
            re.compile(r"validate|sanitize|escape|trim|parse", _I),
            re.compile(r"format|normalize|serialize|deserialize", _I),
            re.compile(r"setState|useState|useReducer|mutations", _I),
            re.compile(r"api|fetch|axios|http|request|response", _I),
        ],
    },
    RiskLevel.LOW: {
        "documentation": [
            re.compile(r"/\*\*|\*/|//|@param|@return|@throws", _I),
            re.compile(r"interface|type|enum|@types", _I),
        ],
        "styling": [
            re.compile(r"style|css|scss|less|tailwind|theme", _I),
            re.compile(r"flex|grid|position|margin|padding|width|height", _I),
        ],
        "utilities": [
            re.compile(r"util|helper|formatter|parser|converter", _I),
            re.compile(r"const|enum|constant", _I),
            re.compile(r"test|spec|describe|it|expect|assert|mock", _I),
        ],
    },
}

_CODE = r"\.(js|ts|py|rb|php|java|go)$"

FILE_PATTERNS: Dict[RiskLevel, List["re.Pattern[str]"]] = {
    RiskLevel.HIGH: [
        re.compile(r"\.(env|key|pem|crt|csr|p12|pfx)$", _I),
        re.compile(rf"(auth|security|permission|role|login|payment).*{_CODE}", _I),
        re.compile(rf"middleware.*{_CODE}", _I),
        re.compile(rf"migration.*{_CODE}", _I),
    ],
    RiskLevel.MEDIUM: [
        re.compile(r"\.(config|settings)\.(js|ts|json|yml|yaml)$", _I),
        re.compile(rf"(api|service|controller|router).*{_CODE}", _I),
        re.compile(r"(store|reducer|context).*\.(js|ts|jsx|tsx)$", _I),
        re.compile(r"\.sql$", _I),
    ],
    RiskLevel.LOW: [
        re.compile(r"\.(md|mdx|markdown)$", _I),
    ],
}

_MARKDOWN_RE = re.compile(r"\.(md|mdx|markdown)$", _I)

# ── Checklist items ─────────────────────────────────────────────────

COMMON_CHECKS = [
    "Changes are intentional and necessary",
    "Code follows project standards",
]

HIGH_RISK_CHECKS = [
    "Security implications reviewed",
    "Error handling is comprehensive",
    "Input validation is thorough",
    "Sensitive data is properly handled",
    "Proper logging (no sensitive data)",
    "Performance impact considered",
]

CHANGE_TYPE_CHECKS: Dict[ChangeType, List[str]] = {
    ChangeType.ADDED: [
        "New file is necessary and properly placed",
        "Dependencies are properly managed",
        "File organization follows project structure",
    ],
    ChangeType.MODIFIED: [
        "No unintended changes",
        "Backwards compatibility maintained",
        "Related files updated",
    ],
    ChangeType.DELETED: [
        "File removal impact is assessed",
        "All references removed",
        "No breaking changes introduced",
        "Clean up related resources",
    ],
    ChangeType.RENAMED: [
        "All references updated",
        "Import/export paths corrected",
        "Documentation updated",
    ],
}

TEST_FILE_CHECKS = [
    "Test cases are comprehensive",
    "Edge cases are covered",
    "Assertions are meaningful",
]

JSON_FILE_CHECKS = [
    "JSON structure is valid",
    "Configuration is complete",
    "No sensitive data exposed",
]


class RiskAssessor:
    """Stateless, deterministic risk classification of a file change."""

    def __init__(self, risk_patterns=None, file_patterns=None):
        self.risk_patterns = risk_patterns or RISK_PATTERNS
        self.file_patterns = file_patterns or FILE_PATTERNS

    def identify_risk_level(self, path: str, diff_lines: Sequence[str]) -> RiskLevel:
        """Risk for ``path`` given its changed lines.

        Markdown is always LOW. Otherwise the first file tier that matches
        sets a baseline; the first content tier that matches replaces it
        only when it is riskier.
        """
        if _MARKDOWN_RE.search(path):
            return RiskLevel.LOW

        level = RiskLevel.LOW
        for tier, patterns in self.file_patterns.items():
            if any(p.search(path) for p in patterns):
                level = tier
                break

        text = "\n".join(diff_lines)
        for tier, categories in self.risk_patterns.items():
            if any(p.search(text) for patterns in categories.values() for p in patterns):
                if tier > level:
                    level = tier
                break

        return level

    def generate_checklist(self, path: str, change_type: ChangeType, risk_level: RiskLevel) -> str:
        checks = list(COMMON_CHECKS)
        if risk_level is RiskLevel.HIGH:
            checks.extend(HIGH_RISK_CHECKS)
        checks.extend(CHANGE_TYPE_CHECKS.get(change_type, []))
        if "test" in path:
            checks.extend(TEST_FILE_CHECKS)
        if path.endswith(".json"):
            checks.extend(JSON_FILE_CHECKS)
        return "\n".join(f"- [ ] {item}" for item in checks)
