"""
Content proxy: serve stored documents inline through the backend.

The browser only ever sees `/api/content/{document_id}`; the short-lived signed URL obtained
from the grant service is used server-side and discarded. Entry point: `ContentProxyGateway`.
"""
