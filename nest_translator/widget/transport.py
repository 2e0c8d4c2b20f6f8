# =============================================================================
# WIDGET TRANSPORT
# =============================================================================
# Remote translate call used by the widget controller.

import asyncio
import aiohttp
from typing import Any, Dict, Optional, Protocol

from ..exceptions import TranslateRequestError


class TranslateTransport(Protocol):
    async def translate(self, payload: Dict[str, str]) -> Dict[str, Any]: ...


class HttpTranslateTransport:
    """POSTs {id, title, subtitle, content} to {api_base}/api/translate"""
    
    def __init__(self, api_base: str, timeout: float = 60.0,
                 session: Optional[aiohttp.ClientSession] = None):
        self.api_base = api_base.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session
        self._owns_session = session is None
    
    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def close(self):
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None
    
    async def translate(self, payload: Dict[str, str]) -> Dict[str, Any]:
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
        
        url = f"{self.api_base}/api/translate"
        try:
            async with self.session.post(url, json=payload) as response:
                if response.status < 200 or response.status >= 300:
                    raise TranslateRequestError(
                        f"Translation request failed: {response.status}",
                        status=response.status
                    )
                data = await response.json()
        except aiohttp.ClientError as e:
            raise TranslateRequestError(f"Translation request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TranslateRequestError("Translation request timed out") from e
        
        if not isinstance(data, dict):
            raise TranslateRequestError("Translation response was not a JSON object")
        return data
