"""Default questionnaire.

The question catalog the rules table recognizes, with option labels for
presentation and export. Also reports which questions are still open.
"""

from typing import Optional

from .rules import QuestionId
from .schema import (
    AnswerSet,
    Capability,
    Question,
    QuestionCategory,
    QuestionOption,
    QuestionType,
    RangeConfig,
)


def _capability_options() -> list[QuestionOption]:
    return [
        QuestionOption(value=c.value, label=c.label.capitalize())
        for c in Capability
    ]


DEFAULT_QUESTIONS: list[Question] = [
    # REQUIREMENTS (What you need)
    Question(
        id=QuestionId.PRIMARY_USE_CASE.value,
        text="What is the primary use case?",
        help_text="Select the main capability you need.",
        category=QuestionCategory.REQUIREMENTS,
        type=QuestionType.SINGLE_SELECT,
        weight=1.0,
        options=[
            QuestionOption(value="code", label="Code Generation & Tech Specs"),
            QuestionOption(value="creative", label="Creative Content & Ideation"),
            QuestionOption(value="data-analysis", label="Data Analysis & Reporting"),
            QuestionOption(value="customer-service", label="Customer Service & Support"),
            QuestionOption(value="automation", label="Agents & Workflow Automation"),
            QuestionOption(value="research", label="Deep Research & Analysis"),
            QuestionOption(value="compliance", label="Audit, Risk & Contract Review"),
            QuestionOption(value="multilingual", label="Translation & Global Support"),
        ],
    ),
    Question(
        id=QuestionId.TEAM_SIZE.value,
        text="How many people will use the platform?",
        help_text="Enterprise platforms pay off for large rollouts.",
        category=QuestionCategory.REQUIREMENTS,
        type=QuestionType.NUMERIC_RANGE,
        weight=0.8,
        range=RangeConfig(min=1, max=10000, step=10, unit="users"),
    ),
    Question(
        id=QuestionId.INTEGRATION_NEEDS.value,
        text="Which systems must the platform integrate with?",
        category=QuestionCategory.REQUIREMENTS,
        type=QuestionType.MULTI_SELECT,
        weight=0.8,
        options=[
            QuestionOption(value="microsoft", label="Microsoft 365 (Teams, Outlook, SharePoint)"),
            QuestionOption(value="google", label="Google Workspace (Gmail, Docs, Drive)"),
            QuestionOption(value="salesforce", label="Salesforce CRM"),
            QuestionOption(value="slack", label="Slack"),
            QuestionOption(value="api", label="Custom applications via API"),
            QuestionOption(value="none", label="No integrations needed"),
        ],
    ),

    # CONSTRAINTS (Deal-breakers)
    Question(
        id=QuestionId.BUDGET_CEILING.value,
        text="What is the maximum monthly budget per user?",
        help_text="Enterprise AI typically ranges $20-$60/user.",
        category=QuestionCategory.CONSTRAINTS,
        type=QuestionType.NUMERIC_RANGE,
        weight=0.7,
        range=RangeConfig(min=0, max=200, step=5, unit="USD/user/month"),
    ),
    Question(
        id=QuestionId.REQUIRED_CERTIFICATES.value,
        text="Which compliance certifications are mandatory?",
        help_text="Missing these will heavily penalize platforms.",
        category=QuestionCategory.CONSTRAINTS,
        type=QuestionType.MULTI_SELECT,
        weight=0.9,
        options=[
            QuestionOption(value="SOC2", label="SOC 2"),
            QuestionOption(value="ISO27001", label="ISO 27001"),
            QuestionOption(value="HIPAA", label="HIPAA"),
            QuestionOption(value="GDPR", label="GDPR"),
            QuestionOption(value="FedRAMP", label="FedRAMP"),
            QuestionOption(value="none", label="Standard Commercial Security"),
        ],
    ),
    Question(
        id=QuestionId.ECOSYSTEM.value,
        text="Which primary ecosystem does your organization use?",
        help_text="This is the most critical factor for your primary AI platform.",
        category=QuestionCategory.CONSTRAINTS,
        type=QuestionType.SINGLE_SELECT,
        weight=1.0,
        options=[
            QuestionOption(value="microsoft", label="Microsoft 365", description="Deep integration with Copilot"),
            QuestionOption(value="google", label="Google Workspace", description="Deep integration with Gemini"),
            QuestionOption(value="salesforce", label="Salesforce", description="Deep integration with Agentforce"),
            QuestionOption(value="slack", label="Slack-centric"),
            QuestionOption(value="mixed", label="Mixed / Best-of-Breed", description="We use both or other systems"),
            QuestionOption(value="other", label="Other / On-Premise"),
        ],
    ),
    Question(
        id=QuestionId.DATA_RESIDENCY.value,
        text="Where must your data be stored?",
        category=QuestionCategory.CONSTRAINTS,
        type=QuestionType.MULTI_SELECT,
        weight=0.6,
        options=[
            QuestionOption(value="us", label="United States"),
            QuestionOption(value="eu", label="European Union"),
            QuestionOption(value="uk", label="United Kingdom"),
            QuestionOption(value="apac", label="Asia-Pacific"),
            QuestionOption(value="canada", label="Canada"),
            QuestionOption(value="global", label="Flexible / Global"),
        ],
    ),

    # PRIORITIES (What matters most)
    Question(
        id=QuestionId.PRIORITY_RANKING.value,
        text="Rank the capabilities that matter most to you.",
        help_text="Put the most important capability first.",
        category=QuestionCategory.PRIORITIES,
        type=QuestionType.RANKED_LIST,
        weight=0.8,
        options=_capability_options(),
    ),
    Question(
        id=QuestionId.IMPLEMENTATION_URGENCY.value,
        text="How quickly do you need to be up and running?",
        category=QuestionCategory.PRIORITIES,
        type=QuestionType.SINGLE_SELECT,
        weight=0.6,
        options=[
            QuestionOption(value="immediate", label="Immediately (within 2 weeks)"),
            QuestionOption(value="fast", label="Fast (within a month)"),
            QuestionOption(value="standard", label="Standard (1-3 months)"),
            QuestionOption(value="flexible", label="Flexible"),
        ],
    ),
    Question(
        id=QuestionId.CONTEXT_IMPORTANCE.value,
        text="How important is processing long documents?",
        category=QuestionCategory.PRIORITIES,
        type=QuestionType.SINGLE_SELECT,
        weight=0.5,
        options=[
            QuestionOption(value="critical", label="Critical (100K+ tokens)"),
            QuestionOption(value="important", label="Important (50K+ tokens)"),
            QuestionOption(value="nice", label="Nice to have (10K+ tokens)"),
            QuestionOption(value="unimportant", label="Not important"),
        ],
    ),
    Question(
        id=QuestionId.MARKET_POSITION.value,
        text="How much does vendor market position matter?",
        category=QuestionCategory.PRIORITIES,
        type=QuestionType.SINGLE_SELECT,
        weight=0.4,
        options=[
            QuestionOption(value="critical", label="Must be a market leader"),
            QuestionOption(value="important", label="Prefer an established vendor"),
            QuestionOption(value="neutral", label="Doesn't matter"),
            QuestionOption(value="underdog", label="Prefer an emerging challenger"),
        ],
    ),
]


def _catalog(questions: Optional[list[Question]]) -> list[Question]:
    return DEFAULT_QUESTIONS if questions is None else questions


def get_question(question_id: str, questions: Optional[list[Question]] = None) -> Optional[Question]:
    """Look up a question by id."""
    for question in _catalog(questions):
        if question.id == question_id:
            return question
    return None


def pending_questions(
    answers: AnswerSet,
    questions: Optional[list[Question]] = None,
) -> list[Question]:
    """Unanswered questions, in catalog order."""
    return [q for q in _catalog(questions) if q.id not in answers]


def completion(answers: AnswerSet, questions: Optional[list[Question]] = None) -> float:
    """Fraction of the questionnaire answered (0.0-1.0)."""
    catalog = _catalog(questions)
    if not catalog:
        return 0.0
    answered = sum(1 for q in catalog if q.id in answers)
    return answered / len(catalog)
