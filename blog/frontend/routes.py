import math
from pathlib import Path

import pendulum
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from blog.frontend.api_client import ApiError, PostsApiClient
from blog.frontend.forms import PostForm
from blog.models.post import PostStatus

TEMPLATES_PATH = Path(__file__).parent / "templates"


def format_date(value: str | None) -> str:
    if not value:
        return ""
    return pendulum.parse(value).format("MMMM D, YYYY HH:mm")


templates = Jinja2Templates(directory=str(TEMPLATES_PATH))
templates.env.filters["format_date"] = format_date

router = APIRouter()


def api_client(request: Request) -> PostsApiClient:
    return request.app.state.api_client


def _error_page(request: Request, error: ApiError) -> HTMLResponse:
    template = "not_found.html" if error.is_not_found else "error.html"
    return templates.TemplateResponse(
        request, template, {"message": error.message}, status_code=error.status_code
    )


def _form_page(
    request: Request,
    form: PostForm,
    errors: dict[str, str] | None = None,
    error: str | None = None,
    post: dict | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "posts/form.html",
        {
            "form": form,
            "errors": errors or {},
            "error": error,
            "post": post,
            "statuses": [s.value for s in PostStatus] if post else ["draft", "published"],
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return templates.TemplateResponse(request, "home.html", {})


@router.get("/posts", response_class=HTMLResponse)
async def posts(
    request: Request,
    page: int = 1,
    post_status: str | None = Query(default=None, alias="status"),
    client: PostsApiClient = Depends(api_client),
):
    per_page = request.app.state.settings.posts_per_page
    error = None
    try:
        result = await client.list_posts(page, per_page, post_status or None)
    except ApiError as exc:
        error = exc.message
        result = {"data": [], "page": 1, "per_page": per_page, "total": 0}
    return templates.TemplateResponse(
        request,
        "posts/list.html",
        {
            "posts": result["data"],
            "page": result["page"],
            "total": result["total"],
            "total_pages": max(math.ceil(result["total"] / result["per_page"]), 1),
            "status": post_status or "",
            "statuses": [s.value for s in PostStatus],
            "error": error,
        },
    )


@router.get("/posts/new", response_class=HTMLResponse)
async def new_post(request: Request):
    return _form_page(request, PostForm())


@router.post("/posts/new", response_class=HTMLResponse)
async def create_post(
    request: Request, client: PostsApiClient = Depends(api_client)
) -> Response:
    form = PostForm.model_validate(dict(await request.form()))
    if errors := form.field_errors():
        return _form_page(
            request, form, errors=errors, status_code=status.HTTP_400_BAD_REQUEST
        )
    try:
        post = await client.create_post(form.create_payload())
    except ApiError as exc:
        return _form_page(request, form, error=exc.message, status_code=exc.status_code)
    return RedirectResponse(f"/posts/{post['id']}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/posts/{post_id}", response_class=HTMLResponse)
async def post_detail(
    request: Request, post_id: int, client: PostsApiClient = Depends(api_client)
):
    try:
        post = await client.get_post(post_id)
    except ApiError as exc:
        return _error_page(request, exc)
    return templates.TemplateResponse(request, "posts/detail.html", {"post": post})


@router.get("/posts/{post_id}/edit", response_class=HTMLResponse)
async def edit_post(
    request: Request, post_id: int, client: PostsApiClient = Depends(api_client)
):
    try:
        post = await client.get_post(post_id, count_view=False)
    except ApiError as exc:
        return _error_page(request, exc)
    return _form_page(request, PostForm.model_validate(post), post=post)


@router.post("/posts/{post_id}/edit", response_class=HTMLResponse)
async def update_post(
    request: Request, post_id: int, client: PostsApiClient = Depends(api_client)
) -> Response:
    form = PostForm.model_validate(dict(await request.form()))
    post = {"id": post_id}
    if errors := form.field_errors():
        return _form_page(
            request,
            form,
            errors=errors,
            post=post,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    try:
        await client.update_post(post_id, form.update_payload())
    except ApiError as exc:
        if exc.is_not_found:
            return _error_page(request, exc)
        return _form_page(
            request, form, error=exc.message, post=post, status_code=exc.status_code
        )
    return RedirectResponse(f"/posts/{post_id}", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/posts/{post_id}/delete")
async def delete_post(
    request: Request, post_id: int, client: PostsApiClient = Depends(api_client)
) -> Response:
    try:
        await client.delete_post(post_id)
    except ApiError as exc:
        return _error_page(request, exc)
    return RedirectResponse("/posts", status_code=status.HTTP_303_SEE_OTHER)
