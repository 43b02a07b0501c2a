"""Render targets: the abstract view sink and an in-memory HTML document."""

from abc import ABC, abstractmethod
from typing import Optional

from ..state.models import Notice
from .models import MarketsViewModel, ModalViewModel, ViewModel
from .render import (
    MARKETS_REGION,
    MODALS_REGION,
    NOTICE_REGION,
    REGIONS,
    HtmlRenderer,
    render_markets,
    render_modal,
    render_notice,
)


class View(ABC):
    """Receives view models; the only place rendering side effects happen."""

    @abstractmethod
    def render(self, vm: ViewModel) -> None:
        """Replace the whole page."""

    @abstractmethod
    def render_markets(self, markets: MarketsViewModel) -> None:
        """Replace only the market list."""

    @abstractmethod
    def render_modal(self, modal: Optional[ModalViewModel]) -> None:
        """Show a dialog, or close the open one when None."""

    @abstractmethod
    def render_notice(self, notice: Optional[Notice]) -> None:
        """Surface a message to the user."""


class Document:
    """Named regions holding HTML fragments."""

    def __init__(self):
        self.regions: dict[str, str] = {name: "" for name in REGIONS}

    def replace(self, region: str, html: str) -> None:
        if region not in self.regions:
            raise KeyError(f"Unknown region: {region}")
        self.regions[region] = html

    def get(self, region: str) -> str:
        return self.regions[region]


class HtmlView(View):
    """View that renders into a Document."""

    def __init__(self, document: Optional[Document] = None, renderer: Optional[HtmlRenderer] = None):
        self.document = document or Document()
        self.renderer = renderer or HtmlRenderer()
        self.last_view_model: Optional[ViewModel] = None

    def render(self, vm: ViewModel) -> None:
        self.last_view_model = vm
        for region, html in self.renderer.render(vm).items():
            self.document.replace(region, html)

    def render_markets(self, markets: MarketsViewModel) -> None:
        self.document.replace(MARKETS_REGION, render_markets(markets))

    def render_modal(self, modal: Optional[ModalViewModel]) -> None:
        self.document.replace(MODALS_REGION, render_modal(modal))

    def render_notice(self, notice: Optional[Notice]) -> None:
        self.document.replace(NOTICE_REGION, render_notice(notice))
