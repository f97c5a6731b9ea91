#!filepath: src/catalog_links/link_builder.py
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from catalog_links.errors import MaxDepthExceeded
from catalog_links.lookup import ProductCategoryLookup
from catalog_links.models import CategoryId, LinkRequest, to_uid
from catalog_links.resolver import CategoryPathResolver
from catalog_links.settings import LinkSettings
from catalog_links.signals import BEFORE_BUILD_URI, SignalDispatcher
from catalog_links.url import QueryStringRenderer
from catalog_links.utils.logger import get_logger

logger = get_logger(__name__)

Renderer = Callable[[LinkRequest], str]

ACTION_SHOW = "show"
ACTION_LIST = "list"


class LinkBuilder:
    """Build product single view and category list links.

    Category arguments come from the resolver, root first. Every link request
    passes through the ``before_build_uri`` signal before it is rendered.

    Args:
        resolver: Category path resolver.
        product_categories: Lookup for products passed as plain ids.
        language_uid: Language for generated links, settings default if None.
        settings: Link naming settings.
        renderer: Callable turning a LinkRequest into a URL.
        signals: Dispatcher for before_build_uri slots.
    """

    def __init__(
        self,
        resolver: CategoryPathResolver,
        product_categories: Optional[ProductCategoryLookup] = None,
        language_uid: Optional[int] = None,
        settings: Optional[LinkSettings] = None,
        renderer: Optional[Renderer] = None,
        signals: Optional[SignalDispatcher] = None,
    ) -> None:
        self._resolver = resolver
        self._products = product_categories
        self._settings = settings or LinkSettings()
        self._language_uid = (
            int(language_uid) if language_uid is not None else self._settings.language_uid
        )
        self._renderer: Renderer = renderer or QueryStringRenderer()
        self.signals = signals or SignalDispatcher()

    @property
    def language_uid(self) -> int:
        return self._language_uid

    def set_language_uid(self, language_uid: int) -> None:
        self._language_uid = int(language_uid)

    def build_for_product(
        self,
        page_uid: int,
        product: Any,
        category: Any = None,
        exclude_categories: bool = False,
        absolute: bool = False,
    ) -> str:
        """Build a product single view link.

        Args:
            page_uid: Target page id.
            product: Product object or id.
            category: Category object or id overriding the product's first category.
            exclude_categories: Leave category arguments out of the link.
            absolute: Build an absolute link.

        Returns:
            str: Rendered link.
        """
        arguments: Dict[str, Any] = {}
        product_uid = to_uid(product)
        if not exclude_categories:
            category_uid = self._product_category_uid(product, category)
            arguments = self.category_arguments(category_uid)
        arguments["product"] = product_uid
        return self._build_uri(page_uid, ACTION_SHOW, arguments, absolute)

    def build_for_category(self, page_uid: int, category: Any, absolute: bool = False) -> str:
        """Build a category list view link."""
        arguments = self.category_arguments(to_uid(category))
        return self._build_uri(page_uid, ACTION_LIST, arguments, absolute)

    def build_for_arguments(self, page_uid: int, arguments: Dict[str, Any]) -> str:
        """Build a link for prepared arguments, for example from breadcrumbs."""
        action = ACTION_SHOW if "product" in arguments else ACTION_LIST
        return self._build_uri(page_uid, action, dict(arguments))

    def category_arguments(self, category_uid: CategoryId) -> Dict[str, Any]:
        try:
            return dict(
                self._resolver.category_arguments(
                    category_uid, prefix=self._settings.argument_prefix
                )
            )
        except MaxDepthExceeded as e:
            logger.error(f"Category tree too deep or cyclic for {category_uid}: {e}")
            raise

    def _product_category_uid(self, product: Any, category: Any) -> CategoryId:
        if category is not None:
            return to_uid(category)

        first_category = getattr(product, "first_category", None)
        if callable(first_category):
            return to_uid(first_category())

        if self._products is None:
            return 0
        ids = self._products.category_ids_for_product(to_uid(product))
        return int(ids[0]) if ids else 0

    def _build_uri(
        self, page_uid: int, action: str, arguments: Dict[str, Any], absolute: bool = False
    ) -> str:
        arguments["action"] = action
        arguments["controller"] = self._settings.controller

        request = LinkRequest(
            page_uid=int(page_uid),
            language_uid=self._language_uid,
            namespace=self._settings.namespace,
            arguments=arguments,
            use_cache_hash=self._settings.use_cache_hash,
            absolute=bool(absolute),
        )
        self.signals.emit(BEFORE_BUILD_URI, request=request)
        return self._renderer(request)
