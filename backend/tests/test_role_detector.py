from resumegen.services.role_detector import available_roles, detect_role, score_roles


def test_devops_job_detected():
    jd = "Looking for an SRE: Kubernetes, Terraform, Docker, CI/CD pipelines, Prometheus and Grafana."
    assert detect_role(jd) == "devops"


def test_salesforce_weight_applies():
    scores = score_roles("Salesforce developer with Apex and LWC")
    # salesforce, salesforce developer, apex, lwc -> 4 hits * 1.2
    assert scores["salesforce"] == 4 * 1.2
    assert detect_role("Salesforce developer with Apex and LWC") == "salesforce"


def test_fullstack_boost_when_frontend_and_backend_strong():
    jd = (
        "React, TypeScript, CSS and HTML on the client; Python, PostgreSQL, "
        "Redis and GraphQL on the server."
    )
    scores = score_roles(jd)
    assert scores["frontend"] > 2 and scores["backend"] > 2
    assert scores["fullstack"] == (scores["frontend"] + scores["backend"]) * 0.3


def test_role_name_is_scored_too():
    assert detect_role("We are hiring.", "iOS Swift mobile developer") == "mobile"


def test_weak_signal_falls_back_to_default():
    assert detect_role("We are hiring a great teammate.") == "default"
    assert detect_role("") == "default"


def test_available_roles_lists_all_categories():
    roles = available_roles()
    assert "backend" in roles and "sap" in roles
    assert len(roles) == 11
