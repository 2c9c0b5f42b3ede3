from __future__ import annotations

import pytest
from PyQt6.QtWidgets import QLabel

from pyqt_configform.core.field_manifest import FieldManifest
from pyqt_configform.widgets.dynamic_form import DynamicForm, FormConfig

from qt_helpers import Recorder, process_events, type_text


def make_form(fields, value=None, **config) -> DynamicForm:
    return DynamicForm(FieldManifest.from_dict({"fields": fields}), value, FormConfig(**config))


BASIC_FIELDS = [
    {"name": "name", "type": "string", "displayName": "Name", "required": True},
    {"name": "retries", "type": "number"},
    {"name": "enabled", "type": "boolean"},
    {
        "name": "mode",
        "type": "select",
        "options": [{"value": "fast", "label": "Fast"}, {"value": "safe", "label": "Safe"}],
    },
    {"name": "notes", "type": "textarea"},
]


def test_empty_manifest_shows_notice(qt_app) -> None:
    form = make_form([])
    notice = form.findChild(QLabel, "no_configuration_notice")
    assert notice is not None
    assert notice.text() == "No configuration required for this component."
    assert form.widgets == {}


def test_hidden_field_is_not_rendered_but_its_value_is_kept(qt_app) -> None:
    form = make_form(
        [{"name": "name", "type": "string"}, {"name": "secret", "type": "string", "hidden": True}],
        {"name": "a", "secret": "s3cr3t"},
    )
    changes = Recorder(form.value_changed)

    assert "secret" not in form.widgets
    type_text(form.widgets["name"], "b")
    assert changes.last == {"name": "b", "secret": "s3cr3t"}


def test_unknown_type_renders_placeholder(qt_app) -> None:
    form = make_form([{"name": "shade", "type": "color"}])
    placeholder = form.findChild(QLabel, "shade_unsupported")
    assert placeholder is not None
    assert placeholder.text() == "Unsupported field type: color"


def test_required_field_label_is_marked(qt_app) -> None:
    form = make_form(BASIC_FIELDS)
    assert form.findChild(QLabel, "name_label").text() == "Name *"


def test_each_edit_changes_only_its_own_path(qt_app) -> None:
    initial = {"name": "svc", "retries": 3, "enabled": False, "mode": "fast", "notes": ""}
    form = make_form(BASIC_FIELDS, initial)
    changes = Recorder(form.value_changed)
    paths = Recorder(form.field_changed)

    type_text(form.widgets["name"], "api")
    type_text(form.widgets["retries"], "5")
    form.widgets["enabled"].setChecked(True)
    form.widgets["mode"].setCurrentIndex(1)
    form.widgets["notes"].setPlainText("hello")

    assert changes.calls == [
        {**initial, "name": "api"},
        {**initial, "name": "api", "retries": 5},
        {**initial, "name": "api", "retries": 5, "enabled": True},
        {**initial, "name": "api", "retries": 5, "enabled": True, "mode": "safe"},
        {**initial, "name": "api", "retries": 5, "enabled": True, "mode": "safe", "notes": "hello"},
    ]
    assert [path for path, _ in paths.calls] == ["name", "retries", "enabled", "mode", "notes"]
    assert initial == {"name": "svc", "retries": 3, "enabled": False, "mode": "fast", "notes": ""}


def test_cleared_number_emits_none(qt_app) -> None:
    form = make_form([{"name": "retries", "type": "number"}], {"retries": 2})
    changes = Recorder(form.value_changed)
    type_text(form.widgets["retries"], "")
    assert changes.last == {"retries": None}


def test_round_trip_through_host_keeps_widgets(qt_app) -> None:
    form = make_form(BASIC_FIELDS, {"name": "a"})
    form.value_changed.connect(form.set_value)
    name_widget = form.widgets["name"]

    type_text(name_widget, "ab")
    type_text(form.widgets["name"], "abc")

    assert form.widgets["name"] is name_widget
    assert form.get_value() == {"name": "abc"}


def test_set_value_updates_displayed_values(qt_app) -> None:
    form = make_form(BASIC_FIELDS, {"name": "a"})
    form.set_value({"name": "b", "mode": "safe"})
    assert form.widgets["name"].text() == "b"
    assert form.widgets["mode"].get_value() == "safe"


def test_nested_object_edits_write_under_their_parent(qt_app) -> None:
    form = make_form(
        [
            {
                "name": "connection",
                "type": "object",
                "fields": [{"name": "host", "type": "string"}, {"name": "port", "type": "number"}],
            }
        ],
        {"connection": {"host": "db", "port": 5432}},
    )
    changes = Recorder(form.value_changed)

    type_text(form.widgets["connection.host"], "db2")
    type_text(form.widgets["connection.port"], "6543")

    assert changes.last == {"connection": {"host": "db2", "port": 6543}}


def test_errors_show_under_fields(qt_app) -> None:
    form = make_form(
        [
            {"name": "name", "type": "string"},
            {"name": "connection", "type": "object", "fields": [{"name": "host", "type": "string"}]},
        ],
        errors={"name": "Name is required"},
    )
    assert form.findChild(QLabel, "name_error").text() == "Name is required"

    form.set_errors({"connection.host": "Unreachable"})
    assert form.findChild(QLabel, "name_error") is None
    assert form.findChild(QLabel, "connection_error").text() == "Unreachable"
    assert form.findChild(QLabel, "connection.host_error") is None


def test_default_value_is_displayed_without_being_emitted(qt_app) -> None:
    form = make_form(
        [{"name": "region", "type": "string", "defaultValue": "us-east-1"}, {"name": "other", "type": "string"}]
    )
    changes = Recorder(form.value_changed)
    assert form.widgets["region"].text() == "us-east-1"

    type_text(form.widgets["other"], "x")
    assert changes.last == {"other": "x"}


def test_visibility_condition_toggles_field(qt_app) -> None:
    form = make_form(
        [
            {"name": "auth", "type": "boolean"},
            {
                "name": "token",
                "type": "string",
                "visibilityConditions": [{"field": "auth", "values": ["true"]}],
            },
        ],
        {"auth": False},
    )
    assert "token" not in form.widgets

    form.widgets["auth"].setChecked(True)
    process_events(qt_app)
    assert "token" in form.widgets

    form.widgets["auth"].setChecked(False)
    process_events(qt_app)
    assert "token" not in form.widgets


@pytest.mark.parametrize("field", BASIC_FIELDS, ids=lambda f: f["type"])
def test_disabled_form_disables_every_editor(qt_app, field) -> None:
    form = make_form([field], disabled=True)
    assert not form.widgets[field["name"]].isEnabled()


def test_set_disabled_rebuilds_enabled_state(qt_app) -> None:
    form = make_form(BASIC_FIELDS, disabled=True)
    form.set_disabled(False)
    assert form.widgets["name"].isEnabled()


def test_from_manifest_dict(qt_app) -> None:
    form = DynamicForm.from_manifest_dict({"fields": [{"name": "a", "type": "string"}]}, {"a": "1"}, disabled=True)
    assert form.widgets["a"].text() == "1"
    assert form.disabled


def test_malformed_scalar_value_renders_empty(qt_app) -> None:
    form = make_form([{"name": "name", "type": "string"}, {"name": "tags", "type": "map"}], {"name": {"x": 1}, "tags": "oops"})
    assert form.widgets["name"].text() == ""
    assert form.widgets["tags"].rows == []


def test_dotted_field_name_is_a_single_key(qt_app) -> None:
    form = make_form([{"name": "metadata.labels", "type": "string"}], {"metadata.labels": "v"})
    changes = Recorder(form.value_changed)
    paths = Recorder(form.field_changed)

    assert form.widgets["metadata.labels"].text() == "v"
    type_text(form.widgets["metadata.labels"], "w")

    assert changes.last == {"metadata.labels": "w"}
    assert paths.last == ("metadata.labels", "w")


def test_nameless_field_writes_empty_key_and_keeps_siblings(qt_app) -> None:
    form = make_form([{"type": "string"}], {"keep": "k"})
    changes = Recorder(form.value_changed)

    type_text(form.widgets[""], "x")

    assert changes.last == {"keep": "k", "": "x"}


def test_hidden_child_of_object_keeps_its_value(qt_app) -> None:
    form = make_form(
        [
            {
                "name": "connection",
                "type": "object",
                "fields": [
                    {"name": "host", "type": "string"},
                    {"name": "password", "type": "string", "hidden": True},
                ],
            }
        ],
        {"connection": {"host": "db", "password": "p"}},
    )
    changes = Recorder(form.value_changed)

    assert "connection.password" not in form.widgets
    type_text(form.widgets["connection.host"], "db2")
    assert changes.last == {"connection": {"host": "db2", "password": "p"}}


def test_hidden_child_of_array_item_keeps_its_value(qt_app) -> None:
    form = make_form(
        [
            {
                "name": "servers",
                "type": "array",
                "itemType": "object",
                "fields": [
                    {"name": "host", "type": "string"},
                    {"name": "token", "type": "string", "hidden": "true"},
                ],
            }
        ],
        {"servers": [{"host": "a", "token": "t"}]},
    )
    changes = Recorder(form.value_changed)

    assert "servers[0].token" not in form.widgets
    type_text(form.widgets["servers[0].host"], "b")
    assert changes.last == {"servers": [{"host": "b", "token": "t"}]}


def test_number_outside_range_is_not_emitted(qt_app) -> None:
    form = make_form([{"name": "port", "type": "number", "min": 1, "max": 10}], {"port": 2})
    changes = Recorder(form.value_changed)

    type_text(form.widgets["port"], "50")
    assert changes.calls == []

    type_text(form.widgets["port"], "5")
    assert changes.calls == [{"port": 5}]


def test_range_hint_needs_both_bounds(qt_app) -> None:
    form = make_form(
        [
            {"name": "port", "type": "number", "min": 1, "max": 65535},
            {"name": "retries", "type": "number", "min": 0},
        ]
    )
    assert form.findChild(QLabel, "port_range").text() == "Range: 1 - 65535"
    assert form.findChild(QLabel, "retries_range") is None


@pytest.mark.parametrize(
    "value, default, checked",
    [("false", None, False), ("true", None, True), (None, "false", False), (None, "true", True), (0, None, False)],
)
def test_toggle_reads_string_booleans(qt_app, value, default, checked) -> None:
    field = {"name": "flag", "type": "boolean", "defaultValue": default}
    form = make_form([field], {"flag": value} if value is not None else {})
    assert form.widgets["flag"].isChecked() is checked
