#!/usr/bin/env python3
"""
Publish a blog post directly into the configured SQL database.

Usage:
  python scripts/add_blog_post.py --title "..." --slug my-post --category investing \
      --excerpt "..." --content-file post.html [--tags sip,elss] [--featured] [--draft]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# make the financeai package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from financeai.domain.blog import estimate_read_time, is_valid_slug  # noqa: E402
from financeai.domain.models import BlogPostCreate  # noqa: E402
from financeai.repositories.sql_repository import SQLRepository  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Publish a blog post into the SQL database")
    ap.add_argument("--title", required=True)
    ap.add_argument("--slug", required=True, help="lowercase words separated by dashes")
    ap.add_argument("--category", required=True)
    ap.add_argument("--excerpt", required=True)
    ap.add_argument("--content-file", required=True, type=Path, help="HTML body of the post")
    ap.add_argument("--tags", default="", help="comma separated")
    ap.add_argument("--author")
    ap.add_argument("--featured", action="store_true")
    ap.add_argument("--draft", action="store_true", help="store with published=false")
    args = ap.parse_args()

    slug = args.slug.strip().lower()
    if not is_valid_slug(slug):
        raise SystemExit("Invalid slug (use [a-z0-9] words separated by single dashes)")
    repo = SQLRepository()
    if repo.get_blog_post_by_slug(slug):
        raise SystemExit(f"Slug '{slug}' is already in use")
    content = args.content_file.read_text(encoding="utf-8")

    data = BlogPostCreate(
        title=args.title.strip(),
        slug=slug,
        excerpt=args.excerpt.strip(),
        content=content,
        category=args.category.strip(),
        tags=[t.strip() for t in args.tags.split(",") if t.strip()],
        featured=args.featured,
        published=not args.draft,
        read_time=estimate_read_time(content),
    )
    if args.author:
        data.author = args.author.strip()
    post = repo.create_blog_post(data)
    print("OK: blog post stored")
    print(f"  id: {post.id}")
    print(f"  slug: {post.slug}")
    print(f"  read time: {post.read_time} min")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
