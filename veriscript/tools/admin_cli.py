#!/usr/bin/env python3
"""Administrator CLI: applicants, review decisions and the scoring rubric."""

import logging
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from veriscript.applicants.models import SampleType, Track
from veriscript.applicants.status import StatusEvent
from veriscript.applicants.store import YamlProfileStore
from veriscript.applicants.workflow import add_sample, new_profile, record_decision, require_profile
from veriscript.assessment.models import RubricCriterion
from veriscript.assessment.rubric import DEFAULT_RUBRIC, new_criterion_id, total_points
from veriscript.assessment.rubric_parser import RubricParser
from veriscript.errors import VeriScriptError
from veriscript.libs.config_loader import get_config, load_all_configs

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
LOG = logging.getLogger(__name__)

console = Console()

STATUS_STYLES = {
    'PROFILE_SUBMITTED': 'white',
    'ASSESSMENT_PENDING': 'yellow',
    'REVIEWING': 'blue',
    'ONBOARDED': 'green',
    'REJECTED': 'red',
}


@click.group()
@click.option(
    '--store',
    type=click.Path(path_type=Path),
    default=None,
    help='Profile store YAML file (overrides config value)'
)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def main(ctx, store, verbose):
    """Manage VeriScript applicants and the scoring rubric."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if store is None:
        store = Path(get_config("store.path", load_all_configs()))
    ctx.obj = YamlProfileStore(store)


@main.command('list')
@click.pass_obj
def list_applicants(store):
    """List all applicants with their scores."""
    table = Table(title="Applicants")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Track")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("AI %", justify="right")
    table.add_column("Authorship", justify="right")
    table.add_column("Pastes", justify="right")

    for profile in store.get_all():
        result = profile.assessment.result if profile.assessment else None
        style = STATUS_STYLES.get(profile.status.value, 'white')
        table.add_row(
            profile.id,
            profile.full_name,
            profile.track.value if profile.track else "-",
            f"[{style}]{profile.status.value.replace('_', ' ')}[/{style}]",
            str(result.overall_score) if result else "-",
            f"{result.metrics.detected_ai_probability:.0f}" if result else "-",
            f"{result.authorship_match_score:.0f}" if result else "-",
            str(result.paste_count) if result and result.paste_count is not None else "-",
        )

    console.print(table)


@main.command()
@click.option('--name', required=True, help='Full name')
@click.option('--email', required=True, help='Contact email')
@click.option('--track', type=click.Choice([t.value for t in Track]), default=None)
@click.option('--experience', type=float, default=0, help='Years of writing experience')
@click.option('--bio', default="", help='Short biography')
@click.option(
    '--sample',
    'samples',
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Baseline writing sample file (repeatable)'
)
@click.pass_obj
def add(store, name, email, track, experience, bio, samples):
    """Register an applicant with optional baseline samples."""
    profile = new_profile(name, email, Track(track) if track else None, experience, bio)
    for path in samples:
        profile = add_sample(profile, path.name, path.read_text(encoding='utf-8', errors='ignore'),
                             SampleType.UPLOADED)
    store.put(profile)
    console.print(f"[green]Created applicant[/green] {profile.id} with {len(profile.samples)} samples")


@main.command()
@click.argument('applicant_id')
@click.pass_obj
def show(store, applicant_id):
    """Show one applicant's assessment in detail."""
    try:
        profile = require_profile(store, applicant_id)
    except VeriScriptError:
        raise click.ClickException(f"No applicant with id {applicant_id}") from None

    console.print(f"\n[bold cyan]{profile.full_name}[/bold cyan] <{profile.email}>")
    console.print(f"Status: {profile.status.value}   Track: {profile.track.value if profile.track else '-'}")
    console.print(f"Samples: {len(profile.samples)}")

    if not profile.assessment or not profile.assessment.result:
        console.print("\n[yellow]No completed assessment.[/yellow]")
        return

    result = profile.assessment.result
    rubric = {c.id: c for c in store.get_rubric()}

    table = Table(title=f"Rubric Scores (overall {result.overall_score}/100)")
    table.add_column("Criterion", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Comments")
    for score in result.rubric_scores:
        criterion = rubric.get(score.criterion_id)
        label = criterion.category if criterion else score.criterion_id
        max_points = criterion.max_points if criterion else "?"
        table.add_row(label, f"{score.score:g}/{max_points}", score.comments)
    console.print(table)

    metrics = result.metrics
    console.print(f"\nTone: {metrics.tone}   Traits: {', '.join(metrics.key_traits) or '-'}")
    console.print(f"AI probability: {metrics.detected_ai_probability:.0f}%   "
                  f"Authorship match: {result.authorship_match_score:.0f}%")
    if result.plagiarism:
        console.print(f"Plagiarism similarity: {result.plagiarism.score:.0f}%")
        for source in result.plagiarism.sources:
            console.print(f"  - {source.title} ({source.uri})")
    console.print(f"Time taken: {result.time_taken_seconds or 0:.0f}s   Pastes: {result.paste_count}")
    console.print(f"\n[bold]Feedback:[/bold] {result.feedback}")


@main.command()
@click.argument('applicant_id')
@click.argument('decision', type=click.Choice(['onboard', 'reject']))
@click.pass_obj
def decide(store, applicant_id, decision):
    """Onboard or reject an applicant."""
    event = StatusEvent.ONBOARD if decision == 'onboard' else StatusEvent.REJECT
    try:
        profile = record_decision(store, applicant_id, event)
    except VeriScriptError as e:
        raise click.ClickException(str(e))
    console.print(f"[green]{profile.full_name} is now {profile.status.value}[/green]")


@main.group()
def rubric():
    """Inspect or change the scoring rubric."""


@rubric.command('show')
@click.pass_obj
def rubric_show(store):
    """Print the active rubric."""
    criteria = store.get_rubric()
    table = Table(title=f"Rubric ({total_points(criteria)} points)")
    table.add_column("Id", style="cyan")
    table.add_column("Category")
    table.add_column("Points", justify="right")
    table.add_column("Description")
    for c in criteria:
        table.add_row(c.id, c.category, str(c.max_points), c.description)
    console.print(table)


@rubric.command('import')
@click.argument('markdown_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--yes', is_flag=True, help='Save without prompting')
@click.pass_obj
def rubric_import(store, markdown_path, yes):
    """Replace the rubric with criteria parsed from a markdown file."""
    try:
        criteria = RubricParser().parse_file(markdown_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    console.print(f"Parsed {len(criteria)} criteria totaling {total_points(criteria)} points")
    if yes or click.confirm("Replace the active rubric?", default=True):
        store.put_rubric(criteria)
        console.print("[green]Rubric saved.[/green]")


@rubric.command('reset')
@click.pass_obj
def rubric_reset(store):
    """Restore the built-in default rubric."""
    store.put_rubric(DEFAULT_RUBRIC)
    console.print("[green]Default rubric restored.[/green]")


def _save_rubric(store, criteria):
    try:
        store.put_rubric(criteria)
    except VeriScriptError as e:
        raise click.ClickException(str(e))
    console.print(f"[green]Rubric saved[/green] ({len(criteria)} criteria, "
                  f"{total_points(criteria)} points)")


@rubric.command('add')
@click.option('--category', default="New Criterion", help='Short label for the criterion')
@click.option('--points', type=int, default=10, help='Maximum points')
@click.option('--description', default="Description", help='What is being evaluated')
@click.pass_obj
def rubric_add(store, category, points, description):
    """Append a criterion to the active rubric."""
    criteria = store.get_rubric()
    try:
        criterion = RubricCriterion(id=new_criterion_id(criteria), category=category,
                                    description=description, max_points=points)
    except ValidationError as e:
        raise click.ClickException(f"Invalid criterion: {e.errors()[0]['msg']}")
    _save_rubric(store, [*criteria, criterion])
    console.print(f"Added criterion {criterion.id}: {criterion.category}")


@rubric.command('edit')
@click.argument('criterion_id')
@click.option('--category', default=None, help='New label')
@click.option('--points', type=int, default=None, help='New maximum points')
@click.option('--description', default=None, help='New description')
@click.pass_obj
def rubric_edit(store, criterion_id, category, points, description):
    """Change fields of one criterion."""
    updates = {k: v for k, v in (('category', category), ('max_points', points),
                                 ('description', description)) if v is not None}
    if not updates:
        raise click.UsageError("Nothing to change: pass --category, --points or --description")

    criteria = store.get_rubric()
    if criterion_id not in {c.id for c in criteria}:
        raise click.ClickException(f"No criterion with id {criterion_id}")
    # model_copy skips validation; put_rubric rejects non-positive points
    _save_rubric(store, [c.model_copy(update=updates) if c.id == criterion_id else c
                         for c in criteria])


@rubric.command('remove')
@click.argument('criterion_id')
@click.pass_obj
def rubric_remove(store, criterion_id):
    """Delete one criterion from the active rubric."""
    criteria = store.get_rubric()
    remaining = [c for c in criteria if c.id != criterion_id]
    if len(remaining) == len(criteria):
        raise click.ClickException(f"No criterion with id {criterion_id}")
    _save_rubric(store, remaining)


if __name__ == '__main__':
    main()
