"""
Minimal Starlette application serving compiled stylesheets

Run it with::

    uvicorn app:app --reload

and open http://127.0.0.1:8000/css/site.css. Edit ``styles/partials/_colors.scss``
and reload: the stylesheet is recompiled because ``site.scss`` imports it.
"""
from pathlib import Path

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import HTMLResponse
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from lazycss import StylesheetMiddleware, StylesheetConfig
from lazycss.utils.log_utils import configure_logging

HERE = Path(__file__).parent
PUBLIC = HERE / "public"
PUBLIC.mkdir(exist_ok=True)

config = StylesheetConfig(
    source_dir=str(HERE / "styles"),
    output_dir=str(PUBLIC / "css"),
    output_root=str(PUBLIC),
    debug=True,
)


async def index(request):
    return HTMLResponse('<link rel="stylesheet" href="/css/site.css"><p class="greeting">Hello</p>')


configure_logging(debug=config.debug)

app = Starlette(
    routes=[
        Route("/", index),
        Mount("/", app=StaticFiles(directory=PUBLIC), name="public"),
    ],
    middleware=[Middleware(StylesheetMiddleware, config=config)],
)
