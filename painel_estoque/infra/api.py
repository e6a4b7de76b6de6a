# painel_estoque/infra/api.py
"""
Cliente HTTP da API de estoque (httpx, assíncrono).

Um método por verbo sobre as coleções de ``Recurso``. Qualquer falha de
rede ou status HTTP de erro vira ``ApiError``, já registrada no log de
API; quem chama decide como avisar o usuário.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from painel_estoque.config import API_BASE_URL, DEFAULTS
from painel_estoque.domain.models import Recurso
from painel_estoque.infra.logger import log_api_call


class ApiError(Exception):
    """Falha em uma chamada à API remota."""

    def __init__(self, message: str, method: str, path: str, status_code: Optional[int] = None):
        self.message = message
        self.method = method
        self.path = path
        self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        status = f" ({self.status_code})" if self.status_code is not None else ""
        return f"{self.method} {self.path}{status}: {self.message}"


class ApiClient:
    """Acesso às coleções fornecedores/produtos/entradas/retiradas/movimentacoes.

    ``transport`` permite injetar um ``httpx.MockTransport`` nos testes.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = DEFAULTS.timeout_s,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -----------------------
    # núcleo
    # -----------------------

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = e.response.text[:200] if e.response.text else "sem corpo"
            log_api_call(method, path, status=status, error=body)
            raise ApiError(body, method, path, status) from e
        except httpx.RequestError as e:
            log_api_call(method, path, error=str(e))
            raise ApiError(str(e) or e.__class__.__name__, method, path) from e

        log_api_call(method, path, status=response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError("resposta não é JSON", method, path, response.status_code) from e

    # -----------------------
    # operações
    # -----------------------

    async def listar(self, recurso: Recurso) -> List[Dict[str, Any]]:
        """GET /<recurso>: coleção inteira (a API não pagina)."""
        data = await self._request("GET", recurso.path)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError("coleção esperada", "GET", recurso.path)
        return data

    async def obter(self, recurso: Recurso, item_id: Any) -> Dict[str, Any]:
        """GET /<recurso>/<id>."""
        data = await self._request("GET", recurso.item_path(item_id))
        return data or {}

    async def criar(self, recurso: Recurso, payload: Dict[str, Any]) -> Any:
        """POST /<recurso>."""
        return await self._request("POST", recurso.path, json=payload)

    async def atualizar(self, recurso: Recurso, item_id: Any, payload: Dict[str, Any]) -> Any:
        """PUT /<recurso>/<id>."""
        return await self._request("PUT", recurso.item_path(item_id), json=payload)

    async def excluir(self, recurso: Recurso, item_id: Any) -> None:
        """DELETE /<recurso>/<id>."""
        await self._request("DELETE", recurso.item_path(item_id))
