"""
Server-rendered blog pages.

Form submissions redirect (303) on both success and failure; failures
carry a flash message shown on the page the user lands on.
"""
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from inkwell.dependencies import get_backend
from inkwell.routers.flash import FlashCategory, clear_flash, read_flash, set_flash
from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.errors import (
    BlogNotFound,
    ConcurrentlyDeleted,
    InvalidName,
    NameTaken,
    TitleTaken,
)

router = APIRouter(tags=["pages"])


def blog_url(name: str) -> str:
    return f"/blogs/{quote(name, safe='')}"


def new_post_url(name: str) -> str:
    return f"{blog_url(name)}/create"


def post_url(name: str, title: str) -> str:
    return f"{blog_url(name)}/p/{quote(title, safe='')}"


# Setup templates
templates_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))
templates.env.globals.update(blog_url=blog_url, new_post_url=new_post_url, post_url=post_url)


def _cookie_name(request: Request) -> str:
    return request.app.state.settings.FLASH_COOKIE_NAME


def render(
    request: Request,
    template: str,
    context: dict | None = None,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> HTMLResponse:
    """Render a page, consuming any pending flash message."""
    cookie_name = _cookie_name(request)
    flash = read_flash(request, cookie_name)
    response = templates.TemplateResponse(
        request,
        template,
        {"flash": flash, **(context or {})},
        status_code=status_code,
        headers=headers,
    )
    if flash is not None:
        clear_flash(response, cookie_name)
    return response


def _redirect_with_flash(
    request: Request,
    url: str,
    category: FlashCategory,
    message: str,
) -> Response:
    response = RedirectResponse(url, status_code=303)
    set_flash(response, category, message, _cookie_name(request))
    return response


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Landing page."""
    return render(request, "index.html")


@router.get("/newblog", response_class=HTMLResponse)
async def new_blog_form(request: Request):
    """Form for creating a blog."""
    return render(request, "newblog.html")


@router.post("/newblog")
async def new_blog_accept(
    request: Request,
    name: str = Form(""),
    description: str | None = Form(None),
    backend: StorageBackend = Depends(get_backend),
):
    """Create a blog from the submitted form."""
    try:
        await backend.create_blog(name, description)
    except NameTaken:
        return _redirect_with_flash(request, "/newblog", FlashCategory.ERROR, "name taken")
    except InvalidName as exc:
        return _redirect_with_flash(request, "/newblog", FlashCategory.ERROR, exc.message)
    except ConcurrentlyDeleted:
        return _redirect_with_flash(
            request,
            "/newblog",
            FlashCategory.WARNING,
            "internal error occurred, try again in a few seconds",
        )
    return RedirectResponse(blog_url(name), status_code=303)


@router.get("/blogs", response_class=HTMLResponse)
async def blogs(request: Request, backend: StorageBackend = Depends(get_backend)):
    """All blogs with their descriptions."""
    return render(request, "blogs.html", {"blogs": await backend.list_blogs()})


@router.get("/blogs/{name}", response_class=HTMLResponse)
async def blog_home(request: Request, name: str, backend: StorageBackend = Depends(get_backend)):
    """A blog's description and post titles."""
    blog = await backend.get_blog(name)
    return render(request, "blog.html", {"blog": blog})


@router.get("/blogs/{name}/create", response_class=HTMLResponse)
async def create_post_form(
    request: Request,
    name: str,
    backend: StorageBackend = Depends(get_backend),
):
    """Form for writing a post; 404 if the blog does not exist."""
    if not await backend.blog_exists(name):
        raise BlogNotFound(name)
    return render(request, "createpost.html", {"blog_name": name})


@router.post("/blogs/{name}/create")
async def new_post_accept(
    request: Request,
    name: str,
    title: str = Form(""),
    body: str = Form(""),
    backend: StorageBackend = Depends(get_backend),
):
    """Create a post from the submitted form."""
    try:
        await backend.create_post(name, title, body)
    except TitleTaken:
        return _redirect_with_flash(
            request,
            new_post_url(name),
            FlashCategory.WARNING,
            "a post with that title already exists",
        )
    except BlogNotFound:
        return _redirect_with_flash(
            request,
            "/blogs",
            FlashCategory.ERROR,
            "that blog doesn't exist or has been deleted",
        )
    except ConcurrentlyDeleted:
        return _redirect_with_flash(
            request,
            "/blogs",
            FlashCategory.ERROR,
            "that blog or post has since been deleted",
        )
    except InvalidName as exc:
        return _redirect_with_flash(request, new_post_url(name), FlashCategory.ERROR, exc.message)
    return RedirectResponse(post_url(name, title), status_code=303)


@router.get("/blogs/{name}/p/{title}", response_class=HTMLResponse)
async def post_page(
    request: Request,
    name: str,
    title: str,
    backend: StorageBackend = Depends(get_backend),
):
    """A single post under its blog's name and description."""
    post = await backend.get_post(name, title)
    blog = await backend.get_blog(name)
    return render(request, "post.html", {"blog": blog, "post": post})


@router.get("/blogs/{name}/{title}", response_class=HTMLResponse)
async def post_short(
    request: Request,
    name: str,
    title: str,
    backend: StorageBackend = Depends(get_backend),
):
    """Short form of the post URL."""
    return await post_page(request, name, title, backend)


def render_error(
    request: Request,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> HTMLResponse:
    """Error page used by the application's exception handlers."""
    return render(
        request,
        "error.html",
        {"status_code": status_code, "message": message},
        status_code=status_code,
        headers=headers,
    )
