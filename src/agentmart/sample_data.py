"""Built-in catalog shown when the backend cannot be reached."""

from decimal import Decimal

from agentmart.models.agent import FAQ, Agent, AgentDetail, Importance
from agentmart.models.package import Package

SAMPLE_AGENTS: tuple[Agent, ...] = (
    Agent(
        id="1",
        name="Email Automation Agent",
        description=(
            "Streamline your email workflow with AI that sorts, prioritizes, and responds "
            "to emails based on your preferences and past actions."
        ),
        price=Decimal("29.99"),
        importance=Importance.MEDIUM,
    ),
    Agent(
        id="2",
        name="Data Analysis Agent",
        description=(
            "Transform raw data into actionable insights with our AI-powered data analysis "
            "tool that automatically identifies trends and patterns."
        ),
        price=Decimal("49.99"),
        importance=Importance.HIGH,
    ),
    Agent(
        id="3",
        name="Customer Support Bot",
        description=(
            "Provide 24/7 customer support with an AI agent that handles common questions "
            "and routes complex issues to your team."
        ),
        price=Decimal("39.99"),
        importance=Importance.MEDIUM,
    ),
    Agent(
        id="4",
        name="Social Media Manager",
        description=(
            "Automate your social media presence with an AI that schedules posts, engages "
            "with followers, and analyzes performance metrics."
        ),
        price=Decimal("19.99"),
        importance=Importance.LOW,
    ),
    Agent(
        id="5",
        name="Content Generation Agent",
        description=(
            "Create high-quality blog posts, product descriptions, and marketing copy with "
            "our AI content generator."
        ),
        price=Decimal("59.99"),
        importance=Importance.HIGH,
    ),
    Agent(
        id="6",
        name="Meeting Scheduler",
        description=(
            "Let AI handle the back-and-forth of scheduling meetings, finding optimal times "
            "based on everyone's availability."
        ),
        price=Decimal("14.99"),
        importance=Importance.LOW,
    ),
)

SAMPLE_AGENT_DETAILS: dict[str, AgentDetail] = {
    "1": AgentDetail(
        id="1",
        name="Email Automation Agent",
        description=(
            "Streamline your email workflow with AI that sorts, prioritizes, and responds to "
            "emails based on your preferences and past actions. This agent integrates with "
            "popular email platforms like Gmail, Outlook, and more."
        ),
        price=Decimal("29.99"),
        importance=Importance.MEDIUM,
        how_to_use=(
            "After purchasing, download the provided .json file and import it into your email "
            "management system. Follow the setup guide to configure the agent according to "
            "your preferences."
        ),
        faqs=[
            FAQ(
                question="What can this agent do?",
                answer=(
                    "This agent can sort incoming emails by priority, generate automatic "
                    "responses for common inquiries, flag important messages, and learn from "
                    "your behaviors to improve over time."
                ),
            ),
            FAQ(
                question="Is it customizable?",
                answer=(
                    "Yes, the agent is fully customizable. You can set up specific rules, "
                    "response templates, and priority criteria to match your specific needs."
                ),
            ),
            FAQ(
                question="Which email platforms are supported?",
                answer=(
                    "Our agent works with Gmail, Outlook, Yahoo Mail, and most other IMAP/POP3 "
                    "email services. Integration is simple with our step-by-step guide."
                ),
            ),
            FAQ(
                question="Do I need technical knowledge to set it up?",
                answer=(
                    "No, the setup process is designed to be user-friendly. Basic familiarity "
                    "with your email platform is all you need."
                ),
            ),
        ],
    ),
    "2": AgentDetail(
        id="2",
        name="Data Analysis Agent",
        description=(
            "Transform raw data into actionable insights with our AI-powered data analysis "
            "tool that automatically identifies trends and patterns. Perfect for businesses "
            "looking to leverage their data for strategic decision-making."
        ),
        price=Decimal("49.99"),
        importance=Importance.HIGH,
        how_to_use=(
            "Import the agent configuration file into your business intelligence platform. "
            "The agent will begin analyzing your data sources and generating insights "
            "immediately."
        ),
        faqs=[
            FAQ(
                question="What types of data can this agent analyze?",
                answer=(
                    "Our agent can work with structured data from spreadsheets, databases, and "
                    "most business applications. It excels at numerical data, time series, and "
                    "categorical information."
                ),
            ),
            FAQ(
                question="How does it present insights?",
                answer=(
                    "The agent generates visual reports with charts, graphs, and written "
                    "summaries highlighting key trends and anomalies in your data."
                ),
            ),
            FAQ(
                question="Can it integrate with our existing tools?",
                answer=(
                    "Yes, the Data Analysis Agent integrates with popular platforms like Excel, "
                    "Google Sheets, SQL databases, and most BI tools."
                ),
            ),
            FAQ(
                question="How often does it update its analysis?",
                answer=(
                    "You can schedule analysis runs hourly, daily, weekly, or trigger them "
                    "manually when needed."
                ),
            ),
        ],
    ),
}

SAMPLE_PACKAGES: tuple[Package, ...] = (
    Package(
        id="basic",
        name="Basic",
        description="For individuals and small businesses just getting started",
        price=Decimal(29),
        features=[
            "Access to 1 AI agent",
            "Basic email support",
            "Standard integration options",
            "Monthly usage reports",
            "Up to 1,000 operations per month",
        ],
    ),
    Package(
        id="pro",
        name="Pro",
        description="For growing businesses with advanced needs",
        price=Decimal(99),
        features=[
            "Access to 5 AI agents",
            "Priority email and chat support",
            "Advanced integration options",
            "Weekly performance reports",
            "Up to 10,000 operations per month",
            "Custom agent training",
        ],
        is_popular=True,
    ),
    Package(
        id="enterprise",
        name="Enterprise",
        description="For large organizations requiring comprehensive solutions",
        price="Custom",
        features=[
            "Unlimited AI agents",
            "24/7 dedicated support",
            "Enterprise-grade integrations",
            "Real-time reporting dashboard",
            "Unlimited operations",
            "Custom agent development",
            "Dedicated account manager",
            "Service level agreement (SLA)",
        ],
    ),
)


def sample_agent_detail(agent_id: str) -> AgentDetail | None:
    """Detail copy for a sample agent, or None for unknown ids."""
    if agent_id in SAMPLE_AGENT_DETAILS:
        return SAMPLE_AGENT_DETAILS[agent_id]
    for agent in SAMPLE_AGENTS:
        if agent.id == agent_id:
            return AgentDetail(**agent.model_dump())
    return None
