"""CLI for the Platform Recommendation Engine.

Provides command-line interface for ranking the platform catalog
against questionnaire answers.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from . import __version__
from .catalog import load_answers, validate_answers, validate_catalog
from .config import find_config_file, load_config, save_default_config
from .engine import RecommendationEngine
from .export import export_json
from .questions import DEFAULT_QUESTIONS, get_question
from .schema import Candidate, Question, QuestionType, ScoreResult

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="platform-recommender")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True),
    help="Path to recommender-config.yaml (default: auto-discovered)"
)
def main(config_path: Optional[str]):
    """Platform Recommendation Engine.

    Ranks the platform catalog against your questionnaire answers and
    explains every score.
    """
    path = Path(config_path) if config_path else find_config_file()
    if path:
        try:
            load_config(path)
        except (ValueError, yaml.YAMLError) as e:
            raise click.ClickException(f"Invalid configuration file {path}: {e}") from e


def parse_answer_value(question_id: str, raw: str) -> Any:
    """Convert a command-line answer string to the shape its question expects."""
    question = get_question(question_id)
    if question is None:
        return raw

    if question.type in (QuestionType.MULTI_SELECT, QuestionType.RANKED_LIST):
        return [item.strip() for item in raw.split(",") if item.strip()]
    if question.type == QuestionType.NUMERIC_RANGE:
        try:
            number = float(raw)
        except ValueError:
            return raw
        return int(number) if number.is_integer() else number
    if question.type == QuestionType.BOOLEAN:
        return raw.strip().lower() in ("true", "yes", "y", "1")
    return raw.strip()


def parse_answer_pairs(pairs: tuple) -> dict[str, Any]:
    """Parse repeated ``question_id=value`` options.

    Raises:
        click.BadParameter: If a pair has no "=" or an empty question id
    """
    answers = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(
                f"expected question_id=value, got '{pair}'",
                param_hint="'--answer'",
            )
        answers[key.strip()] = parse_answer_value(key.strip(), value)
    return answers


@main.command("recommend")
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a candidate catalog JSON file (default: bundled catalog)"
)
@click.option(
    "--answers", "-x",
    type=click.Path(exists=True),
    help="Path to a JSON file of question_id -> answer"
)
@click.option(
    "--answer", "-a",
    multiple=True,
    help="Answer a question (format: question_id=value; comma-separate lists)"
)
@click.option(
    "--max-recommendations", "-n",
    default=5,
    type=int,
    help="Maximum number of recommendations to show"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results (default: stdout)"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show detailed output"
)
@click.option(
    "--interactive/--no-interactive", "-i/-I",
    default=False,
    help="Prompt for unanswered questions before ranking"
)
def recommend_cmd(
    catalog: Optional[str],
    answers: Optional[str],
    answer: tuple,
    max_recommendations: int,
    out: Optional[str],
    json_output: bool,
    verbose: bool,
    interactive: bool,
):
    """Rank the catalog against questionnaire answers.

    Examples:
        platform-recommender recommend -a primary-use-case=code -a budget-ceiling=40
        platform-recommender recommend -x answers.json -n 3 -v
        platform-recommender recommend -c catalog.json -x answers.json -j -o results.json
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    # Usage errors surface through click before anything is loaded
    pair_answers = parse_answer_pairs(answer)

    try:
        user_answers: dict[str, Any] = {}
        if answers:
            user_answers.update({k: a.value for k, a in load_answers(answers).items()})
        user_answers.update(pair_answers)

        engine = RecommendationEngine()
        engine.load_catalog(catalog)

        if interactive and not json_output:
            user_answers = prompt_for_answers(engine.get_questions(user_answers), user_answers)

        results = engine.recommend(user_answers)

        if json_output:
            output_json(results, user_answers, out)
        else:
            console.print(f"\n[bold blue]Platform Recommendation Engine[/bold blue]")
            console.print(f"Catalog: {catalog or 'bundled'} ({engine.catalog.total_candidates} candidates)")
            console.print(f"Answers provided: {len(user_answers)}\n")
            display_results(results[:max_recommendations], verbose, user_answers)
            if out:
                output_json(results, user_answers, out)
                console.print(f"\n[green]Results saved to {out}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("questions")
def questions_cmd():
    """Show the questionnaire and the accepted answer values."""
    console.print(f"\n[bold]Questionnaire ({len(DEFAULT_QUESTIONS)} questions):[/bold]\n")

    for i, q in enumerate(DEFAULT_QUESTIONS, 1):
        console.print(f"[bold cyan]{i}. {q.text}[/bold cyan]")
        console.print(f"   ID: {q.id}  [dim]({q.category.value}, {q.type.value})[/dim]")
        if q.help_text:
            console.print(f"   [dim]{q.help_text}[/dim]")
        if q.range:
            console.print(f"   Range: {q.range.min:g}-{q.range.max:g} {q.range.unit}")
        if q.options:
            console.print("   Options:")
            for opt in q.options:
                console.print(f"     - {opt.value}: {opt.label}")
        console.print()


@main.command("validate")
@click.option(
    "--catalog", "-c",
    type=click.Path(),
    help="Path to a candidate catalog JSON file"
)
@click.option(
    "--answers", "-x",
    type=click.Path(),
    help="Path to an answers JSON file"
)
def validate_cmd(catalog: Optional[str], answers: Optional[str]):
    """Validate catalog and/or answer files.

    Examples:
        platform-recommender validate -c catalog.json
        platform-recommender validate -x answers.json
    """
    if not catalog and not answers:
        console.print("[yellow]Please specify --catalog and/or --answers to validate[/yellow]")
        return

    all_valid = True

    if catalog:
        is_valid, issues = validate_catalog(catalog)
        if is_valid:
            console.print(f"[green]✓ Catalog valid: {catalog}[/green]")
        else:
            console.print(f"[red]✗ Catalog invalid: {catalog}[/red]")
            for issue in issues:
                console.print(f"  - {issue}")
            all_valid = False

    if answers:
        is_valid, issues = validate_answers(answers)
        if is_valid:
            console.print(f"[green]✓ Answers valid: {answers}[/green]")
        else:
            console.print(f"[red]✗ Answers invalid: {answers}[/red]")
            all_valid = False
        for issue in issues:
            console.print(f"  - {issue}")

    sys.exit(0 if all_valid else 1)


@main.command("inspect")
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a candidate catalog JSON file (default: bundled catalog)"
)
@click.option(
    "--id", "candidate_id",
    help="Show details for a specific candidate ID"
)
@click.option(
    "--category", "-g",
    help="Filter by candidate category"
)
def inspect_cmd(catalog: Optional[str], candidate_id: Optional[str], category: Optional[str]):
    """Inspect the candidate catalog."""
    try:
        engine = RecommendationEngine()
        cat = engine.load_catalog(catalog)

        console.print(f"\n[bold blue]Candidate Catalog[/bold blue]")
        console.print(f"Version: {cat.version}")
        console.print(f"Total Candidates: {cat.total_candidates}")
        console.print()

        if candidate_id:
            candidate = next((c for c in cat.candidates if c.id == candidate_id), None)
            if not candidate:
                console.print(f"[red]Candidate not found: {candidate_id}[/red]")
                return
            display_candidate_detail(candidate)
            return

        filtered = cat.candidates
        if category:
            filtered = [c for c in filtered if c.category.lower() == category.lower()]

        console.print(f"Showing {len(filtered)} candidates:\n")

        table = Table(show_header=True, header_style="bold")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Category")
        table.add_column("Price", justify="right")
        table.add_column("Certifications")

        for c in filtered:
            table.add_row(
                c.id,
                c.display_name,
                c.category,
                f"${c.price:g}",
                ", ".join(c.certifications),
            )

        console.print(table)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def _prompt_question(question: Question) -> Any:
    """Prompt for one answer; blank input skips the question."""
    if question.type == QuestionType.NUMERIC_RANGE:
        raw = click.prompt("   Value", default="", show_default=False)
        return parse_answer_value(question.id, raw) if raw.strip() else None

    choice_map = {str(idx): opt.value for idx, opt in enumerate(question.options, 1)}
    multiple = question.type in (QuestionType.MULTI_SELECT, QuestionType.RANKED_LIST)
    hint = "comma-separated, in order" if question.type == QuestionType.RANKED_LIST else (
        "comma-separated" if multiple else f"1-{len(choice_map)}"
    )
    raw = click.prompt(f"   Select [{hint}]", default="", show_default=False)
    if not raw.strip():
        return None

    picks = [choice_map.get(p.strip(), p.strip()) for p in raw.split(",") if p.strip()]
    return picks if multiple else picks[0]


def prompt_for_answers(
    questions: list[Question],
    existing_answers: dict[str, Any],
) -> dict[str, Any]:
    """Interactively prompt for unanswered questions."""
    answers = existing_answers.copy() if existing_answers else {}

    console.print("\n[bold yellow]━━━ Questionnaire ━━━[/bold yellow]")
    console.print("[dim]Press Enter to skip a question.[/dim]\n")

    for i, q in enumerate(questions, 1):
        console.print(f"[bold cyan]{i}. {q.text}[/bold cyan]")
        if q.help_text:
            console.print(f"   [dim]{q.help_text}[/dim]")
        if q.range:
            console.print(f"   [dim]{q.range.min:g}-{q.range.max:g} {q.range.unit}[/dim]")
        for idx, opt in enumerate(q.options, 1):
            desc = f" - {opt.description}" if opt.description else ""
            console.print(f"     [bold]{idx}[/bold]. {opt.label}{desc}")

        try:
            value = _prompt_question(q)
        except click.Abort:
            console.print("\n[yellow]Skipping remaining questions...[/yellow]")
            break

        if value is not None:
            answers[q.id] = value
            console.print(f"   [green]✓ Selected: {value}[/green]\n")
        else:
            console.print("   [dim]Skipped[/dim]\n")

    console.print("[bold yellow]━━━━━━━━━━━━━━━━━━━━━[/bold yellow]\n")
    return answers


def display_results(
    results: list[ScoreResult],
    verbose: bool,
    user_answers: Optional[dict[str, Any]] = None,
):
    """Display ranked results in formatted text."""
    if user_answers:
        console.print("[bold]Your Answers Applied:[/bold]")
        for qid, value in user_answers.items():
            console.print(f"  • {qid}: [cyan]{value}[/cyan]")
        console.print()

    if not results:
        console.print("[yellow]No candidates to rank.[/yellow]")
        return

    top = results[0]
    level_color = {
        "very_high": "green",
        "high": "green",
        "medium": "yellow",
        "low": "red",
    }.get(top.confidence_level.value, "white")

    console.print(Panel(
        f"Top Recommendation: [bold cyan]{top.candidate.display_name}[/bold cyan]\n"
        f"Score: [bold]{top.total_score:.0f}[/bold] ({top.match_level.value})\n"
        f"Confidence: [{level_color}]{top.confidence:.0f} ({top.confidence_level.value})[/{level_color}]",
        title="Recommendation Summary",
    ))

    console.print("\n[bold]Ranking:[/bold]\n")
    for rec in results:
        breakdown = rec.breakdown
        console.print(
            f"  [bold cyan]{rec.rank}. {rec.candidate.display_name}[/bold cyan] "
            f"[bold]{rec.total_score:.0f}%[/bold] "
            f"[dim](confidence {rec.confidence:.0f})[/dim]"
        )
        if verbose:
            console.print(
                f"     Requirements {breakdown.requirements:.0f} | "
                f"Constraints {breakdown.constraints:.0f} | "
                f"Priorities {breakdown.priorities:.0f}"
            )
            if rec.reasons.strengths:
                console.print(f"     [green]Strengths:[/green] {'; '.join(rec.reasons.strengths[:3])}")
            if rec.reasons.concerns:
                console.print(f"     [yellow]Concerns:[/yellow] {'; '.join(rec.reasons.concerns)}")
            if rec.reasons.differentiators:
                console.print(f"     [blue]Differentiators:[/blue] {'; '.join(rec.reasons.differentiators)}")
        console.print()


def display_candidate_detail(candidate: Candidate):
    """Display detailed candidate information."""
    tree = Tree(f"[bold cyan]{candidate.display_name}[/bold cyan]")

    identity = tree.add("[bold]Identity[/bold]")
    identity.add(f"ID: {candidate.id}")
    if candidate.provider:
        identity.add(f"Provider: {candidate.provider}")
    identity.add(f"Category: {candidate.category}")
    if candidate.tier:
        identity.add(f"Tier: {candidate.tier}")
    if candidate.url:
        identity.add(f"URL: {candidate.url}")

    commercial = tree.add("[bold]Commercial[/bold]")
    commercial.add(f"Price: ${candidate.price:g}/user/month")
    commercial.add(f"Market Share: {candidate.market_share:g}%")
    commercial.add(f"Growth Rate: {candidate.growth_rate:g}%")
    commercial.add(f"Implementation: {candidate.implementation_time or 'unknown'}")

    if candidate.certifications:
        certs = tree.add("[bold]Certifications[/bold]")
        for cert in candidate.certifications:
            certs.add(cert)

    capabilities = tree.add("[bold]Capabilities[/bold]")
    capabilities.add(f"Context: {candidate.context_tokens:,} tokens")
    for name, score in candidate.scores.items():
        capabilities.add(f"{name}: {score:g}/10")

    console.print(tree)


def output_json(results: list[ScoreResult], answers: dict[str, Any], out_path: Optional[str]):
    """Output the export document as JSON."""
    json_str = export_json(results, answers)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="recommender-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default recommender configuration file.

    Example:
        platform-recommender init-config --out my-config.yaml
    """
    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • scoring_weights - How much each sub-score contributes to the total")
        console.print("  • confidence - The additive confidence rules")
        console.print("  • match_levels / confidence_levels - Label thresholds")
        console.print("  • reason_limits - How many reasons to list")
        console.print("  • rule_tables - Lookup tables behind the scoring rules")
        console.print("\nThe recommender will look for config in this order:")
        console.print("  1. PLATFORM_RECOMMENDER_CONFIG environment variable")
        console.print("  2. ./recommender-config.yaml (current directory)")
        console.print("  3. ~/.config/platform-recommender/config.yaml")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
