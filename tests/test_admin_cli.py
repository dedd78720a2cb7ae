"""Tests for the administrator CLI."""

import pytest
from click.testing import CliRunner

from veriscript.applicants.models import ApplicationStatus
from veriscript.applicants.store import YamlProfileStore
from veriscript.assessment.rubric import DEFAULT_RUBRIC
from veriscript.tools.admin_cli import main


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "applicants.yaml"


@pytest.fixture
def runner():
    return CliRunner()


def _invoke(runner, store_path, *args, **kwargs):
    return runner.invoke(main, ['--store', str(store_path), *args], **kwargs)


def test_add_and_list(runner, store_path, tmp_path):
    sample = tmp_path / "blog.md"
    sample.write_text("An earlier post about documentation.")

    result = _invoke(runner, store_path, 'add', '--name', 'Ada', '--email', 'ada@example.com',
                     '--track', 'TECHNICAL', '--sample', str(sample))

    assert result.exit_code == 0, result.output
    profiles = YamlProfileStore(store_path).get_all()
    assert len(profiles) == 1
    assert profiles[0].samples[0].title == "blog.md"

    listing = _invoke(runner, store_path, 'list')
    assert listing.exit_code == 0
    assert "Ada" in listing.output


def test_decide(runner, store_path):
    _invoke(runner, store_path, 'add', '--name', 'Bo', '--email', 'bo@example.com')
    profile_id = YamlProfileStore(store_path).get_all()[0].id

    result = _invoke(runner, store_path, 'decide', profile_id, 'reject')

    assert result.exit_code == 0, result.output
    assert YamlProfileStore(store_path).get(profile_id).status == ApplicationStatus.REJECTED

    again = _invoke(runner, store_path, 'decide', profile_id, 'onboard')
    assert again.exit_code != 0
    assert "Cannot apply ONBOARD" in again.output


def test_show_unknown_applicant(runner, store_path):
    result = _invoke(runner, store_path, 'show', 'nobody')

    assert result.exit_code != 0
    assert "No applicant with id nobody" in result.output


def test_rubric_import_and_reset(runner, store_path, tmp_path):
    markdown = tmp_path / "rubric.md"
    markdown.write_text("- Clarity (40 points): Easy to follow\n- Depth (60 points): Covers the topic\n")

    result = _invoke(runner, store_path, 'rubric', 'import', str(markdown), '--yes')

    assert result.exit_code == 0, result.output
    assert [c.category for c in YamlProfileStore(store_path).get_rubric()] == ['Clarity', 'Depth']

    shown = _invoke(runner, store_path, 'rubric', 'show')
    assert "100 points" in shown.output

    _invoke(runner, store_path, 'rubric', 'reset')
    assert YamlProfileStore(store_path).get_rubric() == DEFAULT_RUBRIC


def test_rubric_import_declined(runner, store_path, tmp_path):
    markdown = tmp_path / "rubric.md"
    markdown.write_text("- Clarity (40 points): Easy to follow\n")

    result = _invoke(runner, store_path, 'rubric', 'import', str(markdown), input="n\n")

    assert result.exit_code == 0
    assert YamlProfileStore(store_path).get_rubric() == DEFAULT_RUBRIC


def test_rubric_import_unparseable(runner, store_path, tmp_path):
    markdown = tmp_path / "rubric.md"
    markdown.write_text("Grade it however you like.")

    result = _invoke(runner, store_path, 'rubric', 'import', str(markdown), '--yes')

    assert result.exit_code != 0
    assert "Could not parse rubric" in result.output


class TestRubricEditing:

    def test_add_uses_next_id_and_defaults(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'add')

        assert result.exit_code == 0, result.output
        added = YamlProfileStore(store_path).get_rubric()[-1]
        assert (added.id, added.category, added.max_points, added.description) == \
            ('6', 'New Criterion', 10, 'Description')

    def test_add_with_options(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'add', '--category', 'Citations',
                         '--points', '5', '--description', 'Sources are credited')

        assert result.exit_code == 0, result.output
        rubric = YamlProfileStore(store_path).get_rubric()
        assert len(rubric) == 6
        assert rubric[-1].category == 'Citations'
        assert rubric[-1].max_points == 5

    def test_add_rejects_non_positive_points(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'add', '--points', '0')

        assert result.exit_code != 0
        assert YamlProfileStore(store_path).get_rubric() == DEFAULT_RUBRIC

    def test_edit_changes_only_given_fields(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'edit', '3', '--points', '25')

        assert result.exit_code == 0, result.output
        edited = YamlProfileStore(store_path).get_rubric()[2]
        assert edited.max_points == 25
        assert edited.category == DEFAULT_RUBRIC[2].category

    def test_edit_invalid_points_not_saved(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'edit', '3', '--points', '-4')

        assert result.exit_code != 0
        assert "positive max points" in result.output
        assert YamlProfileStore(store_path).get_rubric() == DEFAULT_RUBRIC

    def test_edit_unknown_criterion(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'edit', '42', '--category', 'X')

        assert result.exit_code != 0
        assert "No criterion with id 42" in result.output

    def test_edit_needs_a_field(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'edit', '1')
        assert result.exit_code != 0

    def test_remove(self, runner, store_path):
        result = _invoke(runner, store_path, 'rubric', 'remove', '2')

        assert result.exit_code == 0, result.output
        assert [c.id for c in YamlProfileStore(store_path).get_rubric()] == ['1', '3', '4', '5']

    def test_remove_then_add_reuses_highest_id(self, runner, store_path):
        _invoke(runner, store_path, 'rubric', 'remove', '5')
        _invoke(runner, store_path, 'rubric', 'add')

        assert [c.id for c in YamlProfileStore(store_path).get_rubric()] == ['1', '2', '3', '4', '5']

    def test_remove_last_criterion_rejected(self, runner, store_path, tmp_path):
        markdown = tmp_path / "rubric.md"
        markdown.write_text("- Clarity (40 points): Easy to follow\n")
        _invoke(runner, store_path, 'rubric', 'import', str(markdown), '--yes')

        result = _invoke(runner, store_path, 'rubric', 'remove', '1')

        assert result.exit_code != 0
        assert "at least one criterion" in result.output
        assert len(YamlProfileStore(store_path).get_rubric()) == 1
