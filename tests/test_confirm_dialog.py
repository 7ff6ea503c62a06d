"""Transient confirm dialog built on top of the dialog service."""

from PyQt6.QtCore import QPoint, Qt
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QLabel, QPushButton

from dialog_test_util import click_at


def _button(service, dialog_id, name):
    return service.container_for(dialog_id).panel.footer.findChild(QPushButton, name)


def test_confirm_button_reports_true(service, qtbot):
    results = []
    ctl = service.confirm("Delete?", "This cannot be undone.", results.append)
    dialog_id = ctl.dialog_id
    assert service.is_dialog_visible(dialog_id)
    panel = service.container_for(dialog_id).panel
    assert panel.title_text() == "Delete?"
    assert panel.body.findChild(QLabel, "confirmMessage").text() == "This cannot be undone."
    _button(service, dialog_id, "confirmAccept").click()
    assert results == [True]
    qtbot.waitUntil(lambda: service.get_dialog(dialog_id) is None)


def test_cancel_button_reports_false(service, qtbot):
    results = []
    ctl = service.confirm("Leave?", "Unsaved changes.", results.append, cancel_text="Stay")
    cancel = _button(service, ctl.dialog_id, "confirmCancel")
    assert cancel.text() == "Stay"
    cancel.click()
    assert results == [False]
    qtbot.waitUntil(lambda: service.get_dialog(ctl.dialog_id) is None)


def test_escape_reports_false_once(service, host, qtbot):
    results = []
    ctl = service.confirm("Sure?", "Really?", results.append)
    QTest.keyClick(host, Qt.Key.Key_Escape)
    QTest.keyClick(host, Qt.Key.Key_Escape)
    assert results == [False]
    qtbot.waitUntil(lambda: service.get_dialog(ctl.dialog_id) is None)


def test_backdrop_click_reports_false(service, qtbot):
    results = []
    ctl = service.confirm("Sure?", "Really?", results.append)
    viewport = service.container_for(ctl.dialog_id).viewport
    viewport.relayout()
    click_at(viewport, QPoint(3, 3))
    assert results == [False]


def test_confirm_ids_are_unique(service):
    a = service.confirm("A", "a", lambda ok: None)
    b = service.confirm("B", "b", lambda ok: None)
    assert a.dialog_id != b.dialog_id
    assert service.is_dialog_visible(a.dialog_id) and service.is_dialog_visible(b.dialog_id)


def test_result_callback_error_is_logged(service, qtbot, caplog):
    def boom(_ok):
        raise RuntimeError("callback failed")

    ctl = service.confirm("X", "y", boom, dialog_id="confirm-explicit")
    assert ctl.dialog_id == "confirm-explicit"
    _button(service, "confirm-explicit", "confirmAccept").click()
    assert "Error in on_result callback for confirm-explicit: callback failed" in caplog.text
    qtbot.waitUntil(lambda: service.get_dialog("confirm-explicit") is None)
