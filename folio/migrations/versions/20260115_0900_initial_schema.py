"""initial_schema

Revision ID: 4c1f0e2a9b7d
Revises:
Create Date: 2026-01-15 09:00:00.000000

Creates the portfolio tables: projects, blog_posts, skills, tags, users,
media_files, site_config and the project_skills / blog_post_tags pair
tables with cascading foreign keys.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1f0e2a9b7d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _enum(name, *values):
    return sa.Enum(*values, name=name, native_enum=False, create_constraint=True)


def upgrade() -> None:
    """Create every table."""
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('long_description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('technologies', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('github_url', sa.String(500), nullable=True),
        sa.Column('demo_url', sa.String(500), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column(
            'status',
            _enum('project_status', 'planning', 'in-progress', 'completed', 'on-hold'),
            nullable=False,
            server_default='planning',
        ),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('completion_date', sa.Date(), nullable=True),
        sa.Column('challenges', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('solutions', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('skills_demonstrated', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('meta_description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("title != ''", name='ck_project_non_empty_title'),
        sa.CheckConstraint("slug != ''", name='ck_project_non_empty_slug'),
    )
    op.create_index('ix_projects_slug', 'projects', ['slug'], unique=True)
    op.create_index('ix_projects_status', 'projects', ['status'])
    op.create_index('ix_projects_featured', 'projects', ['featured'])
    op.create_index('ix_projects_created_at', 'projects', ['created_at'])

    op.create_table(
        'blog_posts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('excerpt', sa.Text(), nullable=True),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('featured_image', sa.String(500), nullable=True),
        sa.Column('tags', sa.Text(), nullable=False, server_default='[]'),
        sa.Column(
            'status',
            _enum('post_status', 'draft', 'published', 'archived'),
            nullable=False,
            server_default='draft',
        ),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('meta_description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("title != ''", name='ck_post_non_empty_title'),
        sa.CheckConstraint("slug != ''", name='ck_post_non_empty_slug'),
        sa.CheckConstraint('view_count >= 0', name='ck_post_view_count_positive'),
    )
    op.create_index('ix_blog_posts_slug', 'blog_posts', ['slug'], unique=True)
    op.create_index('ix_blog_posts_status', 'blog_posts', ['status'])
    op.create_index('ix_blog_posts_category', 'blog_posts', ['category'])
    op.create_index('ix_blog_posts_published_at', 'blog_posts', ['published_at'])
    op.create_index('ix_blog_posts_created_at', 'blog_posts', ['created_at'])

    op.create_table(
        'skills',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column(
            'category',
            _enum(
                'skill_category',
                'frontend', 'backend', 'database', 'tool', 'language', 'other',
            ),
            nullable=False,
            server_default='other',
        ),
        sa.Column('proficiency', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon_url', sa.String(500), nullable=True),
        sa.Column('years_experience', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("name != ''", name='ck_skill_non_empty_name'),
        sa.CheckConstraint(
            'proficiency >= 1 AND proficiency <= 5', name='ck_skill_proficiency_range'
        ),
    )
    op.create_index('ix_skills_name', 'skills', ['name'], unique=True)
    op.create_index('ix_skills_category', 'skills', ['category'])
    op.create_index('ix_skills_created_at', 'skills', ['created_at'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("name != ''", name='ck_non_empty_tag'),
    )
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)
    op.create_index('ix_tags_slug', 'tags', ['slug'], unique=True)
    op.create_index('ix_tags_created_at', 'tags', ['created_at'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column(
            'role',
            _enum('user_role', 'admin', 'editor'),
            nullable=False,
            server_default='editor',
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("email != ''", name='ck_user_non_empty_email'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'media_files',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('original_filename', sa.String(255), nullable=False),
        sa.Column('file_path', sa.String(1000), nullable=False),
        sa.Column('file_url', sa.String(1000), nullable=False),
        sa.Column(
            'file_type',
            _enum('media_type', 'image', 'video', 'document'),
            nullable=False,
        ),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('mime_type', sa.String(255), nullable=False),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('duration', sa.Float(), nullable=True),
        sa.Column('alt_text', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("filename != ''", name='ck_media_non_empty_filename'),
        sa.CheckConstraint('file_size >= 0', name='ck_media_size_positive'),
    )
    op.create_index('ix_media_files_filename', 'media_files', ['filename'], unique=True)
    op.create_index('ix_media_files_created_at', 'media_files', ['created_at'])

    op.create_table(
        'site_config',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('key', sa.String(100), nullable=False, unique=True),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_site_config_created_at', 'site_config', ['created_at'])

    op.create_table(
        'project_skills',
        sa.Column(
            'project_id',
            sa.Integer(),
            sa.ForeignKey('projects.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            'skill_id',
            sa.Integer(),
            sa.ForeignKey('skills.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )

    op.create_table(
        'blog_post_tags',
        sa.Column(
            'blog_post_id',
            sa.Integer(),
            sa.ForeignKey('blog_posts.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            'tag_id',
            sa.Integer(),
            sa.ForeignKey('tags.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    """Drop every table, children first."""
    op.drop_table('blog_post_tags')
    op.drop_table('project_skills')
    op.drop_table('site_config')
    op.drop_table('media_files')
    op.drop_table('users')
    op.drop_table('tags')
    op.drop_table('skills')
    op.drop_table('blog_posts')
    op.drop_table('projects')
