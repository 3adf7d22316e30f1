"""
API routers.

- projects: /api/projects
- blogs: /api/blogs
- skills: /api/skills
- media: /api/media (uploads)
- auth: /api/auth (login, current user)
- search: /api/search
- pages: /api/pages (page data for the public site and admin)
- sitemap: /sitemap.xml
"""
from . import auth, blogs, media, pages, projects, search, sitemap, skills

__all__ = [
    "auth",
    "blogs",
    "media",
    "pages",
    "projects",
    "search",
    "sitemap",
    "skills",
]
