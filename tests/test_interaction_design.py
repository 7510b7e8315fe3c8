"""Tests for the interaction design analyzer."""

import pytest

from design_audit.checks.interaction_design import (
    analyze_empty_states,
    analyze_error_states,
    analyze_feedback,
    analyze_loading_states,
    analyze_micro_interactions,
    audit_interaction_design,
)
from design_audit.inspector import NullInspector
from design_audit.models import Severity

FORMS_LACK_ERRORS = "Forms lack error message display areas"
NO_ERROR_BOUNDARY = "No global error handling UI detected"


def descriptions(issues):
    return [i.description for i in issues]


class TestLoadingStates:

    def test_submit_without_loading_signal(self, make_page):
        page = make_page('<form><input aria-label="q"><button type="submit">Send</button></form>')
        issues = analyze_loading_states(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("Submit button lacks loading state indicators", Severity.HIGH),
        ]

    @pytest.mark.parametrize("button", [
        '<button type="submit" class="btn is-loading">Send</button>',
        '<button type="submit" aria-busy="true">Send</button>',
        '<button type="submit" disabled>Send</button>',
    ])
    def test_loading_signals(self, make_page, button):
        assert analyze_loading_states(make_page(f"<form>{button}</form>")) == []

    def test_async_region_without_loader(self, make_page):
        page = make_page('<div data-async="feed"></div>')
        issues = analyze_loading_states(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("No visible loading indicators found for async content", Severity.MEDIUM),
        ]

    def test_async_region_with_skeleton(self, make_page):
        page = make_page('<div data-async="feed"><div class="skeleton-row"></div></div>')
        assert analyze_loading_states(page) == []


class TestEmptyStates:

    def test_empty_list(self, make_page):
        issues = analyze_empty_states(make_page("<section><ul></ul></section>"))
        assert [(i.description, i.severity) for i in issues] == [
            ("Empty container lacks empty state messaging", Severity.MEDIUM),
        ]

    def test_empty_list_with_sibling_message(self, make_page):
        page = make_page('<section><ul></ul><p class="empty-message">No projects yet</p></section>')
        assert analyze_empty_states(page) == []

    def test_filled_list(self, make_page):
        assert analyze_empty_states(make_page("<ul><li>One</li></ul>")) == []

    def test_search_without_no_results(self, make_page):
        page = make_page('<input type="search" aria-label="Search">')
        issues = analyze_empty_states(page)
        assert [i.severity for i in issues] == [Severity.LOW]


class TestErrorStates:

    def test_error_message_toggle(self, make_page):
        without = analyze_error_states(make_page("<form><input></form>"))
        form_issue = [i for i in without if i.description == FORMS_LACK_ERRORS]
        assert len(form_issue) == 1
        assert form_issue[0].severity == Severity.HIGH

        with_message = analyze_error_states(
            make_page('<form><input><p class="error-message"></p></form>')
        )
        assert FORMS_LACK_ERRORS not in descriptions(with_message)
        assert NO_ERROR_BOUNDARY in descriptions(with_message)
        assert descriptions(with_message) == [d for d in descriptions(without) if d != FORMS_LACK_ERRORS]

    def test_role_alert_counts(self, make_page):
        issues = analyze_error_states(make_page('<form><input><div role="alert"></div></form>'))
        assert FORMS_LACK_ERRORS not in descriptions(issues)

    def test_error_boundary_and_offline_ui(self, make_page):
        page = make_page('<div id="error-root"></div><div class="offline-banner"></div>')
        assert analyze_error_states(page) == []

    def test_no_forms(self, make_page):
        assert descriptions(analyze_error_states(make_page("<p>x</p>"))) == [
            NO_ERROR_BOUNDARY,
            "No offline/network error state detected",
        ]


class TestMicroInteractions:

    def test_bare_buttons(self, make_page):
        issues = analyze_micro_interactions(make_page("<button>Go</button>"))
        assert [(i.description, i.severity) for i in issues] == [
            ("Interactive element lacks pointer cursor", Severity.LOW),
            ("Interactive elements lack hover/focus transition effects", Severity.MEDIUM),
            ("Interactive elements lack visible focus states", Severity.HIGH),
        ]

    def test_polished_buttons(self, make_page):
        css = (
            "button { cursor: pointer; transition: background-color 0.2s ease } "
            "button:focus { outline: 2px solid #06f }"
        )
        assert analyze_micro_interactions(make_page("<button>Go</button>", css=css)) == []

    def test_layout_animation(self, make_page):
        css = (
            "a { transition: opacity .2s; outline: 1px solid } "
            ".grow { animation: expand 1s } @keyframes expand { to { width: 200px } }"
        )
        issues = analyze_micro_interactions(make_page('<a href="/">x</a><div class="grow">y</div>', css=css))
        assert descriptions(issues) == ["Detected potentially performance-heavy animations"]

    def test_transform_animation_is_fine(self, make_page):
        css = ".spin { animation: rotate 1s } @keyframes rotate { to { transform: rotate(360deg) } }"
        assert analyze_micro_interactions(make_page('<div class="spin">y</div>', css=css)) == []


class TestFeedback:

    def test_form_without_success(self, make_page):
        issues = analyze_feedback(make_page("<form><input></form>"))
        assert [(i.description, i.severity) for i in issues] == [
            ("Forms lack success confirmation messaging", Severity.MEDIUM),
        ]

    def test_steps_need_progress(self, make_page):
        steps = '<div data-step="1"></div><div data-step="2"></div>'
        issues = analyze_feedback(make_page(steps))
        assert descriptions(issues) == ["Multi-step process lacks progress indicators"]
        assert analyze_feedback(make_page(f'<ol class="stepper">{steps}</ol>')) == []

    def test_complex_inputs_and_destructive_actions(self, make_page):
        page = make_page('<input type="password"><button class="delete-project">Delete</button>')
        assert descriptions(analyze_feedback(page)) == [
            "Complex form fields lack helpful tooltips or descriptions",
            "Destructive actions lack undo capability or confirmation",
        ]

    def test_help_and_confirmation(self, make_page):
        page = make_page(
            '<input type="password" aria-describedby="pw-help">'
            '<button class="delete-project" data-confirm="Sure?">Delete</button>'
        )
        assert analyze_feedback(page) == []


class TestAuditInteractionDesign:

    @pytest.mark.parametrize("analyzer", [
        analyze_loading_states,
        analyze_empty_states,
        analyze_error_states,
        analyze_micro_interactions,
        analyze_feedback,
    ])
    def test_no_inspector_yields_no_issues(self, analyzer):
        assert analyzer() == []
        assert analyzer(NullInspector()) == []

    def test_no_inspector_scores_ten(self):
        result = audit_interaction_design()
        assert result.score == 10.0
        assert result.issues == ()

    def test_score_floor(self, make_page):
        page = make_page(
            '<form><input type="password"><button type="submit" class="delete">Go</button></form>'
            '<ul></ul><input type="search">'
        )
        assert audit_interaction_design(page).score == 1.0
