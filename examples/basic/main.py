"""Basic example for fastapi-userauth.

Run with: uvicorn main:app --reload

Visit /admin/panel: you are sent to /login, then to the fake identity
provider, which returns to /login/callback?user=alice and back to
/admin/panel. /logout clears the session.
"""
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi_userauth import install_userauth


async def get_user(request: Request):
    name = request.query_params.get("user")
    return {"name": name} if name else None


def login_url_formatter(callback_url: str, root_path: str) -> str:
    return f"/sso?callback={quote(callback_url, safe='')}"


app = FastAPI(title="User Auth Example")
install_userauth(
    app,
    "/admin*",
    secret_key="change-me",
    get_user=get_user,
    login_url_formatter=login_url_formatter,
)


@app.get("/")
async def index():
    return {"message": "public"}


@app.get("/sso")
async def sso(callback: str):
    return {"message": "fake identity provider", "continue": f"{callback}?user=alice"}


@app.get("/admin/panel")
async def admin_panel(request: Request):
    return {"user": request.session["user"]}
