import datetime
from pathlib import Path
from typing import Annotated, Any

from fastapi import APIRouter, Form, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from shortlink.app.core import messages
from shortlink.app.core.config import settings
from shortlink.app.core.enums import LoadState, SubmissionState
from shortlink.app.services.exceptions import LinkServiceError, SubmissionInProgressError
from shortlink.app.utils.display import describe_link, format_timestamp
from shortlink.app.web.deps import CurrentUser, LinkClient, Renderer, UserContext


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

router = APIRouter()
templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["timestamp"] = format_timestamp


def render(
    request: Request,
    user: UserContext,
    name: str,
    context: dict[str, Any],
    status_code: int = status.HTTP_200_OK,
) -> Response:
    response = templates.TemplateResponse(
        request=request,
        name=name,
        context={"project_name": settings.PROJECT_NAME, "user_id": user.user_id, **context},
        status_code=status_code,
    )
    return user.storage.commit(response)


def redirect(user: UserContext, url: str) -> Response:
    return user.storage.commit(RedirectResponse(url=url, status_code=status.HTTP_302_FOUND))


@router.get("/", include_in_schema=False, response_model=None)
async def home_page(request: Request, user: CurrentUser) -> Response:
    return render(request, user, "home.html", {"form": user.workspace.creation.state})


@router.post("/", include_in_schema=False, response_model=None)
async def create_link(
    request: Request,
    user: CurrentUser,
    long_url: Annotated[str, Form()] = "",
    custom_code: Annotated[str, Form()] = "",
    timeout: Annotated[str, Form()] = "",
) -> Response:
    creation = user.workspace.creation
    try:
        creation.update_field("long_url", long_url)
        creation.update_field("custom_code", custom_code)
        creation.update_field("timeout_raw", timeout)
        link = await creation.submit()
    except SubmissionInProgressError:
        return render(
            request,
            user,
            "home.html",
            {"form": creation.state, "notice": messages.SUBMISSION_IN_PROGRESS},
            status_code=status.HTTP_409_CONFLICT,
        )

    if link is not None:
        user.workspace.collection.invalidate()

    form = creation.state
    failed = form.submission_state is SubmissionState.FAILED or bool(form.field_errors)
    return render(
        request,
        user,
        "home.html",
        {"form": form},
        status_code=status.HTTP_400_BAD_REQUEST if failed else status.HTTP_200_OK,
    )


@router.get("/manage", include_in_schema=False, response_model=None)
async def manage_page(
    request: Request,
    user: CurrentUser,
    client: LinkClient,
    renderer: Renderer,
    refresh: bool = False,
) -> Response:
    workspace = user.workspace
    state = await workspace.collection.ensure_loaded(user.user_id, force=refresh)
    if state.load_state is LoadState.ERROR:
        return render(
            request,
            user,
            "manage.html",
            {"error": state.error_message},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    now = datetime.datetime.now(datetime.UTC)
    rows = [describe_link(link, now) for link in state.links]
    qr = None
    selected = workspace.qr.selected_short_code
    for row in rows:
        if row.link.short_code == selected:
            qr = {
                "image": renderer.render(row.link.long_url),
                "asset_url": client.qr_code_asset_ref(row.link.short_code),
            }

    return render(
        request,
        user,
        "manage.html",
        {"links": rows, "selected": selected, "qr": qr, "alert": workspace.pop_alert()},
    )


@router.post("/manage/delete/{link_id}", include_in_schema=False)
async def delete_link(link_id: int, user: CurrentUser) -> Response:
    workspace = user.workspace
    link = workspace.collection.find(link_id)
    try:
        await workspace.collection.remove(link_id, user.user_id)
    except LinkServiceError as exc:
        workspace.flash(exc.message or messages.DELETE_FAILED)
    else:
        if link is not None and workspace.qr.is_selected(link.short_code):
            workspace.qr.clear()
    return redirect(user, "/manage")


@router.post("/manage/qr/{short_code}", include_in_schema=False)
async def toggle_qr(short_code: str, user: CurrentUser) -> Response:
    user.workspace.qr.toggle(short_code)
    return redirect(user, "/manage")
