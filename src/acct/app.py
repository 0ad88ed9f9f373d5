# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from acct.auth.errors import AccountError, AuthError
from acct.auth.store import CredentialStore
from acct.auth.users import UserRecord
from acct.core.forms import profile_errors, registration_errors, user_initials
from acct.infra.kv_store import DEFAULT_STORAGE_PATH, KeyValueStore
from acct.permissions import get_guard, get_store, redirect_authenticated, require_user
from acct.services.orders_service import ALL, ORDER_STATUSES, list_orders, status_badge

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

STORAGE_PATH = Path(os.getenv("ACCT_STORAGE_PATH", str(DEFAULT_STORAGE_PATH))).resolve()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    app.state.store.kv.close()


app = FastAPI(lifespan=_lifespan)
app.state.store = CredentialStore(KeyValueStore(STORAGE_PATH))
logger.info("Account storage at %s", STORAGE_PATH)


@app.middleware("http")
async def _session_middleware(request: Request, call_next):
    store = get_store(request)
    request.state.user = store.current_user() if store.is_authenticated() else None
    return await call_next(request)


templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _long_date(value: str) -> str:
    """2024-03-15T10:00:00.000Z -> March 15, 2024 (unparseable values pass through)."""
    s = str(value or "").strip()
    if not s:
        return ""
    try:
        d = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return s
    return f"{d:%B} {d.day}, {d.year}"


templates.env.filters["longdate"] = _long_date
templates.env.filters["badge"] = status_badge


def _render(request: Request, template_name: str, ctx: dict, status_code: int = 200):
    """TemplateResponse wrapper injecting the navigation state."""
    user = getattr(request.state, "user", None)
    base_ctx = {
        "current_user": user,
        "initials": user_initials(user.email) if user else "",
        "errors": {},
    }
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def _field_errors(e: AccountError) -> dict:
    return {e.field or "submit": e.message}


# ------------------ Routes ------------------


@app.get("/")
def home(request: Request):
    target = get_guard(request).redirect_for("/")
    return RedirectResponse(url=target, status_code=303)


@app.get("/login", response_class=HTMLResponse, dependencies=[Depends(redirect_authenticated)])
def login_get(request: Request):
    return _render(request, "login.html", {"email": ""})


@app.post("/login")
async def login_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
):
    try:
        get_store(request).login(email, password)
    except AuthError as e:
        return _render(request, "login.html", {"email": email, "error": e.message}, status_code=400)
    return RedirectResponse(url="/profile", status_code=303)


@app.post("/logout")
async def logout_post(request: Request):
    get_store(request).logout()
    return RedirectResponse(url="/login", status_code=303)


@app.get("/register", response_class=HTMLResponse, dependencies=[Depends(redirect_authenticated)])
def register_get(request: Request):
    return _render(request, "register.html", {"form": {}})


@app.post("/register")
async def register_post(request: Request):
    form = {str(k): ("" if v is None else str(v)) for k, v in (await request.form()).items()}
    errors = registration_errors(form)
    if not errors:
        try:
            get_store(request).register(
                first_name=form.get("firstName", ""),
                last_name=form.get("lastName", ""),
                email=form.get("email", ""),
                password=form.get("password", ""),
                confirm_password=form.get("confirmPassword", ""),
                phone=form.get("phone", ""),
            )
        except AccountError as e:
            errors = _field_errors(e)
    if errors:
        form.pop("password", None)
        form.pop("confirmPassword", None)
        return _render(request, "register.html", {"form": form, "errors": errors}, status_code=400)
    return RedirectResponse(url="/profile", status_code=303)


@app.get("/forgot-password", response_class=HTMLResponse)
def forgot_password_get(request: Request):
    return _render(request, "forgot_password.html", {"email": "", "success": ""})


@app.post("/forgot-password")
async def forgot_password_post(
    request: Request,
    email: str = Form(""),
    newPassword: str = Form(""),
    confirmPassword: str = Form(""),
):
    try:
        get_store(request).reset_password(email, newPassword, confirmPassword)
    except AccountError as e:
        return _render(
            request,
            "forgot_password.html",
            {"email": email, "success": "", "errors": _field_errors(e)},
            status_code=400,
        )
    return _render(
        request,
        "forgot_password.html",
        {"email": "", "success": "Password has been reset successfully!"},
    )


def _profile_page(request: Request, user: UserRecord, **ctx):
    base = {
        "user": user,
        "form": {
            "firstName": user.first_name,
            "lastName": user.last_name,
            "email": user.email,
            "phone": user.phone,
        },
        "password_error": "",
        "message": "",
    }
    status_code = ctx.pop("status_code", 200)
    return _render(request, "profile.html", {**base, **ctx}, status_code=status_code)


@app.get("/profile", response_class=HTMLResponse)
def profile(request: Request, updated: str = "", user: UserRecord = Depends(require_user)):
    messages = {"profile": "Profile updated", "password": "Password updated"}
    return _profile_page(request, user, message=messages.get(updated, ""))


@app.post("/profile")
async def profile_update(request: Request, user: UserRecord = Depends(require_user)):
    form = {str(k): ("" if v is None else str(v)) for k, v in (await request.form()).items()}
    errors = profile_errors(form)
    if not errors:
        try:
            get_store(request).update_profile(
                first_name=form.get("firstName"),
                last_name=form.get("lastName"),
                email=form.get("email"),
                phone=form.get("phone"),
            )
        except AccountError as e:
            errors = _field_errors(e)
    if errors:
        return _profile_page(request, user, form=form, errors=errors, status_code=400)
    return RedirectResponse(url="/profile?updated=profile", status_code=303)


@app.post("/profile/password")
async def profile_password(
    request: Request,
    oldPassword: str = Form(""),
    newPassword: str = Form(""),
    confirmPassword: str = Form(""),
    user: UserRecord = Depends(require_user),
):
    try:
        get_store(request).change_password(oldPassword, newPassword, confirmPassword)
    except AccountError as e:
        return _profile_page(request, user, password_error=e.message, status_code=400)
    return RedirectResponse(url="/profile?updated=password", status_code=303)


@app.get("/orders", response_class=HTMLResponse)
def orders(request: Request, status: str = ALL, user: UserRecord = Depends(require_user)):
    selected = status if status in ORDER_STATUSES else ALL
    return _render(
        request,
        "orders.html",
        {"orders": list_orders(selected), "statuses": ORDER_STATUSES, "selected": selected},
    )
