"""Tests for the UI probe primitives against the in-memory application."""

import asyncio
import re

import pytest

from ezyvet_qa.actions.wait import text_matches, wait_until
from ezyvet_qa.data import SignalKind
from ezyvet_qa.exceptions import NotFoundTimeout, ProbeTimeout, UnresolvedFieldError
from ezyvet_qa.pages.navigation import navigate_to_tab, tab_role_name


def schedule_toast(app, kind, message, delay):
    asyncio.get_running_loop().call_later(delay, app.show_toast, kind, message)


class TestTextMatching:
    def test_plain_string_is_exact(self):
        assert text_matches("-  Smith,   John ", "- Smith, John")
        assert not text_matches("-  Smith, Johnny", "- Smith, John")

    def test_pattern_is_searched(self):
        assert text_matches("-  Smith, John", re.compile(r"Smith, John(?!\w)"))
        assert not text_matches(None, re.compile("."))

    def test_tab_role_names(self):
        assert tab_role_name("Patients") == "primary-tab-icon-animals"
        assert tab_role_name("Contacts") == "primary-tab-icon-contacts"


class TestWaitUntil:
    @pytest.mark.asyncio
    async def test_returns_first_truthy_value(self):
        calls = []

        async def predicate():
            calls.append(1)
            return "ready" if len(calls) == 3 else None

        assert await wait_until(predicate, 1.0, interval=0.01) == "ready"

    @pytest.mark.asyncio
    async def test_timeout_raises_requested_class(self):
        async def never():
            return False

        with pytest.raises(NotFoundTimeout) as excinfo:
            await wait_until(never, 0.05, interval=0.01, description="nothing", error_cls=NotFoundTimeout)
        assert isinstance(excinfo.value, TimeoutError)
        assert "nothing" in str(excinfo.value)


class TestSearch:
    @pytest.mark.asyncio
    async def test_exact_result(self, ui):
        await navigate_to_tab(ui, "Contacts")
        await ui.search.wait_for_results_list()
        await ui.search.sidebar_search("Alice Existing")

        assert await ui.search.await_search_result("-  Existing, Alice") == "-  Existing, Alice"

    @pytest.mark.asyncio
    async def test_partial_text_is_not_a_match(self, ui):
        await navigate_to_tab(ui, "Contacts")
        await ui.search.sidebar_search("Alice Existing")

        with pytest.raises(NotFoundTimeout):
            await ui.search.await_search_result("-  Existing, Al")

    @pytest.mark.asyncio
    async def test_no_results(self, ui):
        await navigate_to_tab(ui, "Contacts")
        await ui.search.sidebar_search("Nobody Here")

        with pytest.raises(ProbeTimeout):
            await ui.search.await_search_result(re.compile("Nobody"))

    @pytest.mark.asyncio
    async def test_select_result_opens_record(self, ui, app):
        await navigate_to_tab(ui, "Contacts")
        await ui.search.sidebar_search("Alice")
        await ui.search.select_search_result("Existing, Alice")
        assert app.open_contact == "Existing, Alice"

    @pytest.mark.asyncio
    async def test_unknown_tab(self, ui):
        with pytest.raises(ValueError):
            await navigate_to_tab(ui, "Reports")


class TestAutocomplete:
    @pytest.mark.asyncio
    async def test_resolves_unique_option(self, ui, page):
        await navigate_to_tab(ui, "Patients")
        title = await ui.search.resolve_autocomplete(page.get_by_test_id("AnimalColour"), "Bald")
        assert title == "Bald"

    @pytest.mark.asyncio
    async def test_ambiguous_option(self, ui, page):
        await navigate_to_tab(ui, "Patients")
        with pytest.raises(UnresolvedFieldError):
            await ui.search.resolve_autocomplete(page.get_by_test_id("AnimalColour"), "Black")


class TestDropdown:
    @pytest.mark.asyncio
    async def test_lookup_is_typed_with_trailing_space(self, ui, app, page):
        app.appointment_form_open = True
        resource = page.get_by_test_id("Resource")
        trigger = resource.locator('xpath=ancestor::div[contains(@class, "newDropDown")]').locator(
            ".icon-magnifying-glass"
        )

        await ui.dropdown.fill_lookup(resource, trigger, "Dr Jones", re.compile("Dr Jones"))

        assert app.resource.value == "Dr Jones "
        assert app.resource_dropdown.selected == "Dr Jones"

    @pytest.mark.asyncio
    async def test_lookup_without_match(self, ui, app, page):
        app.appointment_form_open = True
        resource = page.get_by_test_id("Resource")
        trigger = resource.locator('xpath=ancestor::div[contains(@class, "newDropDown")]').locator(
            ".icon-magnifying-glass"
        )

        with pytest.raises(UnresolvedFieldError):
            await ui.dropdown.fill_lookup(resource, trigger, "Vet", re.compile("Vet"))
        assert app.resource_dropdown.selected is None

    @pytest.mark.asyncio
    async def test_sidebar_list_dropdown(self, ui, app):
        await navigate_to_tab(ui, "Patients")
        await ui.dropdown.select_from_sidebar_list("clientcontactDropdown", "Existing, Alice")
        assert app.patient_owner == "Existing, Alice"
        assert not app.owner_lookup


class TestToastRace:
    @pytest.mark.asyncio
    async def test_success(self, ui, app):
        schedule_toast(app, "success", "Contact saved", 0.05)
        signal = await ui.toast.await_outcome()
        assert signal.kind == SignalKind.SUCCESS
        assert signal.message == "Contact saved"

    @pytest.mark.asyncio
    async def test_late_error_beats_pending_success(self, ui, app):
        loop = asyncio.get_running_loop()
        started = loop.time()
        schedule_toast(app, "error", "Duplicate record", 0.3)

        signal = await ui.toast.await_outcome()

        assert signal.kind == SignalKind.ERROR
        assert signal.message == "Duplicate record"
        assert loop.time() - started < ui.timeouts.success_toast

    @pytest.mark.asyncio
    async def test_error_wins_when_both_show(self, ui, app):
        app.show_toast("success", "Saved")
        app.show_toast("error", "Validation failed")
        signal = await ui.toast.await_outcome()
        assert signal.kind == SignalKind.ERROR

    @pytest.mark.asyncio
    async def test_success_after_error_window(self, ui, app):
        schedule_toast(app, "success", "Saved", ui.timeouts.error_toast + 0.1)
        signal = await ui.toast.await_outcome()
        assert signal.kind == SignalKind.SUCCESS

    @pytest.mark.asyncio
    async def test_nothing_shown(self, ui):
        signal = await ui.toast.await_outcome()
        assert signal.kind == SignalKind.UNKNOWN

    @pytest.mark.asyncio
    async def test_wait_for_clear(self, ui, app):
        app.show_toast("success", "Old save")
        assert await ui.toast.wait_for_clear()

    @pytest.mark.asyncio
    async def test_wait_for_clear_gives_up(self, ui, app):
        app.toast_ttl = 10
        app.show_toast("success", "Old save")
        assert not await ui.toast.wait_for_clear(timeout=0.1)

    @pytest.mark.asyncio
    async def test_empty_message_holder_does_not_hide_error(self, ui, app):
        app.add('[class*="Error"]', text="")
        schedule_toast(app, "error", "Duplicate record", 0.05)

        signal = await ui.toast.await_outcome(broad=True)

        assert signal.kind == SignalKind.ERROR
        assert signal.message == "Duplicate record"

    @pytest.mark.asyncio
    async def test_hidden_error_toast_is_ignored(self, ui, app):
        app.add(".toast-error", text="Earlier failure", visible=False)
        schedule_toast(app, "success", "Contact saved", 0.05)

        signal = await ui.toast.await_outcome()

        assert signal.kind == SignalKind.SUCCESS
        assert signal.message == "Contact saved"

    @pytest.mark.asyncio
    async def test_message_holders_only_count_when_broad(self, ui, app):
        app.add('[class*="Error"]', text="Field is invalid")
        schedule_toast(app, "success", "Contact saved", 0.05)

        assert (await ui.toast.await_outcome()).kind == SignalKind.SUCCESS
        assert (await ui.toast.await_outcome(broad=True)).kind == SignalKind.ERROR

    @pytest.mark.asyncio
    async def test_wait_for_clear_ignores_empty_and_hidden(self, ui, app):
        app.add('[class*="Error"]', text="")
        app.add('[class*="Success"]', text="   ")
        app.add(".toast-error", text="Earlier failure", visible=False)

        assert await ui.toast.wait_for_clear(timeout=0.1, broad=True)
