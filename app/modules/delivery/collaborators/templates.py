"""Template fetching and rendering."""

import threading
from typing import Any, Dict, Optional

import requests
import structlog
from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from infrastructure.operations import (
    OperationResult,
    OperationStatus,
    classify_http_error,
    classify_template_error,
)
from modules.delivery.collaborators.base import Renderer
from modules.delivery.models import RenderedMessage

logger = structlog.get_logger()


class TemplateRenderer(Renderer):
    """Renders ``subject``/``body`` template sources with Jinja2.

    Templates run in a sandbox with strict undefined handling: a variable
    missing from ``variables`` is a render error rather than an empty string.

    Args:
        templates: Mapping of template code to ``{"subject": ..., "body": ...}``.
            Subclasses override ``fetch`` to load templates from elsewhere.
    """

    def __init__(self, templates: Optional[Dict[str, Dict[str, Any]]] = None):
        self._templates = dict(templates or {})
        self._env = SandboxedEnvironment(undefined=StrictUndefined, autoescape=False)

    def fetch(self, template_code: str) -> OperationResult:
        template = self._templates.get(template_code)
        if template is None:
            return OperationResult.not_found(
                f"Template {template_code} not found",
                error_code="TEMPLATE_NOT_FOUND",
            )
        return OperationResult.success(data=template)

    def render(self, template_code: str, variables: Dict[str, Any]) -> OperationResult:
        fetched = self.fetch(template_code)
        if not fetched.is_success:
            return fetched

        template = fetched.data
        try:
            subject_source = template.get("subject") or ""
            subject = self._env.from_string(subject_source).render(**variables)
            body = self._env.from_string(template["body"]).render(**variables)
        except (TemplateError, KeyError, TypeError) as e:
            logger.warning(
                "template_render_failed", template_code=template_code, error=str(e)
            )
            return classify_template_error(e)

        return OperationResult.success(
            data=RenderedMessage(subject=subject or None, body=body)
        )


class HttpTemplateRenderer(TemplateRenderer):
    """Fetches templates from ``GET {base_url}/api/v1/templates/by-name/{code}``.

    Successful fetches are cached for the life of the process.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        super().__init__()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._cache_lock = threading.Lock()

    def fetch(self, template_code: str) -> OperationResult:
        with self._cache_lock:
            cached = self._templates.get(template_code)
        if cached is not None:
            return OperationResult.success(data=cached)

        url = f"{self._base_url}/api/v1/templates/by-name/{template_code}"
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            result = classify_http_error(e)
            if result.status == OperationStatus.NOT_FOUND:
                return OperationResult.not_found(
                    f"Template {template_code} not found",
                    error_code="TEMPLATE_NOT_FOUND",
                )
            logger.warning(
                "template_fetch_failed",
                template_code=template_code,
                error=result.message,
            )
            return result
        except ValueError as e:
            return OperationResult.transient_error(
                f"Template service returned invalid JSON: {e}",
                error_code="INVALID_RESPONSE",
            )

        template = body.get("data") if isinstance(body, dict) else None
        if not template or "body" not in template:
            return OperationResult.not_found(
                f"Template {template_code} not found",
                error_code="TEMPLATE_NOT_FOUND",
            )

        with self._cache_lock:
            self._templates[template_code] = template
        return OperationResult.success(data=template)
