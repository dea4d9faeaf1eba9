"""
Role Detector — pick a prompt template from the job description.

Each role has a keyword list and a weight. A role's score is the number of
keyword occurrences times its weight; the best score wins if it reaches
MIN_SCORE, otherwise the "default" prompt is used.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

MIN_SCORE = 2
DEFAULT_ROLE = "default"

ROLE_PATTERNS: dict[str, dict] = {
    "frontend": {
        "keywords": [
            "frontend", "front-end", "front end", "ui engineer", "ui developer",
            "react", "vue", "angular", "javascript", "typescript", "html", "css",
            "user interface", "client-side", "browser", "spa", "single page",
            "ui/ux", "user experience", "responsive design", "web design",
        ],
        "weight": 1.0,
    },
    "backend": {
        "keywords": [
            "backend", "back-end", "back end", "server-side", "api", "rest api",
            "graphql", "microservices", "node.js", "python", "java", "go", "rust",
            "database", "postgresql", "mysql", "mongodb", "redis", "elasticsearch",
            "server", "api development", "backend engineer", "server engineer",
        ],
        "weight": 1.0,
    },
    "fullstack": {
        "keywords": [
            "fullstack", "full-stack", "full stack", "full stack engineer",
            "end-to-end", "end to end", "full cycle", "full lifecycle",
        ],
        "weight": 1.2,
    },
    "devops": {
        "keywords": [
            "devops", "dev ops", "sre", "site reliability", "infrastructure",
            "ci/cd", "continuous integration", "continuous deployment", "jenkins",
            "docker", "kubernetes", "k8s", "terraform", "ansible", "aws", "azure",
            "gcp", "cloud infrastructure", "deployment", "automation", "monitoring",
            "prometheus", "grafana", "datadog", "cloudformation",
        ],
        "weight": 1.0,
    },
    "data-science": {
        "keywords": [
            "data scientist", "data science", "machine learning", "ml engineer",
            "data engineer", "data analyst", "analytics", "python", "pandas", "numpy",
            "scikit-learn", "tensorflow", "pytorch", "jupyter", "sql", "data pipeline",
            "etl", "big data", "hadoop", "spark", "data warehouse", "data lake",
            "statistical", "modeling", "ai", "artificial intelligence",
        ],
        "weight": 1.0,
    },
    "mobile": {
        "keywords": [
            "mobile", "ios", "android", "react native", "flutter", "swift", "kotlin",
            "mobile app", "mobile developer", "app development", "native app",
            "cross-platform", "xamarin", "ionic",
        ],
        "weight": 1.0,
    },
    "qa": {
        "keywords": [
            "qa", "quality assurance", "test engineer", "testing", "automation",
            "selenium", "cypress", "jest", "test automation", "qa engineer",
            "quality engineer", "test automation engineer", "sdet",
        ],
        "weight": 1.0,
    },
    "security": {
        "keywords": [
            "security engineer", "cybersecurity", "security", "penetration testing",
            "vulnerability", "security analyst", "infosec", "information security",
            "security architect", "compliance", "soc 2", "iso 27001", "gdpr",
        ],
        "weight": 1.0,
    },
    "product-manager": {
        "keywords": [
            "product manager", "product management", "pm", "product owner", "po",
            "product strategy", "roadmap", "stakeholder", "agile", "scrum master",
        ],
        "weight": 1.0,
    },
    "salesforce": {
        "keywords": [
            "salesforce", "sfdc", "salesforce developer", "salesforce admin", "salesforce consultant",
            "apex", "visualforce", "lightning", "sales cloud", "service cloud", "marketing cloud",
            "salesforce platform", "salesforce architect", "crm", "customer relationship management",
            "salesforce.com", "force.com", "lwc", "lightning web components", "aura", "flows",
            "salesforce cpq", "salesforce commerce cloud", "salesforce integration",
        ],
        "weight": 1.2,
    },
    "sap": {
        "keywords": [
            "sap", "sap consultant", "sap developer", "sap analyst", "sap architect",
            "sap erp", "sap hana", "sap fico", "sap mm", "sap sd", "sap pp", "sap hr",
            "sap abap", "sap basis", "sap bw", "sap bi", "sap ecc", "sap s/4hana",
            "sap successfactors", "sap ariba", "sap hybris", "sap crm", "sap pi", "sap po",
            "sap integration", "sap implementation", "sap migration",
        ],
        "weight": 1.2,
    },
}

# Compiled once at import
_COMPILED: dict[str, tuple[list[re.Pattern[str]], float]] = {
    role: ([re.compile(re.escape(k), re.IGNORECASE) for k in cfg["keywords"]], cfg["weight"])
    for role, cfg in ROLE_PATTERNS.items()
}


def score_roles(job_description: str, role_name: str = "") -> dict[str, float]:
    """Weighted keyword-occurrence score for every role."""
    text = f"{job_description} {role_name}".lower()
    scores: dict[str, float] = {}
    for role, (patterns, weight) in _COMPILED.items():
        hits = sum(len(p.findall(text)) for p in patterns)
        scores[role] = hits * weight

    if scores["frontend"] > 2 and scores["backend"] > 2:
        scores["fullstack"] += (scores["frontend"] + scores["backend"]) * 0.3

    return scores


def detect_role(job_description: str, role_name: str = "") -> str:
    """Return the best-scoring role key, or "default" when nothing scores at least MIN_SCORE."""
    if not job_description:
        return DEFAULT_ROLE

    best_role, best_score = DEFAULT_ROLE, 0.0
    for role, score in score_roles(job_description, role_name).items():
        if score > best_score:
            best_role, best_score = role, score

    if best_score < MIN_SCORE:
        return DEFAULT_ROLE

    logger.info(f"Detected role '{best_role}' (score={best_score:.1f})")
    return best_role


def available_roles() -> list[str]:
    return list(ROLE_PATTERNS)
