"""
Sample resume used to preview templates without an LLM call.
"""

from resumegen.models.generation_models import DocumentExperience, ResumeDocument
from resumegen.models.profile_models import EducationEntry

SAMPLE_DOCUMENT = ResumeDocument(
    name="John Smith",
    title="Senior Software Engineer",
    email="john.smith@example.com",
    location="San Francisco, CA 94102",
    summary=(
        "Senior Software Engineer with 8+ years building scalable web applications and cloud "
        "infrastructure. Expertise in <strong>React.js</strong>, <strong>Node.js</strong>, and "
        "<strong>AWS</strong> with a track record of delivering high-performance solutions for "
        "enterprise clients."
    ),
    skills={
        "Frontend": ["React.js", "Next.js", "TypeScript", "JavaScript", "Tailwind CSS", "Redux"],
        "Backend": ["Node.js", "Express.js", "Python", "Django", "FastAPI", "GraphQL", "REST APIs"],
        "Databases": ["PostgreSQL", "MongoDB", "Redis", "MySQL", "Elasticsearch"],
        "Cloud & Infrastructure": ["AWS (Lambda, S3, EC2, RDS)", "Docker", "Kubernetes", "Terraform"],
        "Testing": ["Jest", "Cypress", "Playwright", "React Testing Library"],
    },
    experience=[
        DocumentExperience(
            title="Senior Software Engineer",
            company="Tech Corp",
            location="San Francisco, CA",
            start_date="Jan 2021",
            end_date="Present",
            details=[
                "Architected a <strong>microservices platform</strong> on <strong>Node.js</strong> "
                "and <strong>React.js</strong> serving 2M+ users with 99.9% uptime",
                "Led migration to <strong>AWS</strong> with <strong>Docker</strong> and "
                "<strong>Kubernetes</strong>, cutting infrastructure costs by 35%",
                "Built <strong>CI/CD pipelines</strong> with <strong>GitHub Actions</strong> "
                "for 15+ services",
            ],
        ),
        DocumentExperience(
            title="Software Engineer",
            company="StartupXYZ",
            location="San Francisco, CA",
            start_date="Mar 2019",
            end_date="Dec 2020",
            details=[
                "Developed full-stack applications with <strong>React.js</strong> and "
                "<strong>PostgreSQL</strong> for 500K+ active users",
                "Added real-time notifications with <strong>WebSockets</strong> and "
                "<strong>Redis</strong> pub/sub",
            ],
        ),
        DocumentExperience(
            title="Junior Software Engineer",
            company="WebDev Solutions",
            location="San Francisco, CA",
            start_date="Jun 2017",
            end_date="Feb 2019",
            details=[
                "Maintained web applications in <strong>JavaScript</strong>, "
                "<strong>Python</strong> and <strong>MySQL</strong>",
            ],
        ),
    ],
    education=[
        EducationEntry(
            degree="Bachelor of Science in Computer Science",
            school="University of California, Berkeley",
            start_year="2013",
            end_year="2017",
            grade="3.8",
        ),
    ],
)
