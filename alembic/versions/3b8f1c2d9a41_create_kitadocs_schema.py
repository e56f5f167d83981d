"""Create KitaDocs schema

Revision ID: 3b8f1c2d9a41
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3b8f1c2d9a41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

verification_status = sa.Enum('PENDING', 'VERIFIED', 'REJECTED', name='verificationstatus')
admin_role = sa.Enum('ADMIN', 'SUPER_ADMIN', name='adminrole')
article_category = sa.Enum(
    'GENERAL_HEALTH', 'NUTRITION', 'MENTAL_HEALTH', 'FITNESS', 'DISEASES',
    'MEDICATIONS', 'PEDIATRICS', 'WOMENS_HEALTH', 'RESEARCH',
    name='articlecategory'
)
form_status = sa.Enum('PENDING', 'SUBMITTED', name='formstatus')
question_status = sa.Enum('PENDING', 'ANSWERED', 'SKIPPED', name='questionstatus')
notification_status = sa.Enum('PENDING', 'SENT', 'FAILED', name='notificationstatus')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'doctors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('is_initial', sa.Boolean(), nullable=False),
        sa.Column('credentials', sa.String(), nullable=False),
        sa.Column('specialization', sa.JSON(), nullable=False),
        sa.Column('current_institution', sa.String(), nullable=False),
        sa.Column('years_of_experience', sa.Integer(), nullable=False),
        sa.Column('education', sa.String(), nullable=False),
        sa.Column('certifications', sa.JSON(), nullable=False),
        sa.Column('awards', sa.JSON(), nullable=False),
        sa.Column('memberships', sa.JSON(), nullable=False),
        sa.Column('publications', sa.JSON(), nullable=False),
        sa.Column('languages_spoken', sa.JSON(), nullable=False),
        sa.Column('areas_of_interest', sa.JSON(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('links', sa.String(), nullable=True),
        sa.Column('license_id', sa.String(), nullable=False),
        sa.Column('verification_status', verification_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_doctors_id'), 'doctors', ['id'], unique=False)
    op.create_index(op.f('ix_doctors_email'), 'doctors', ['email'], unique=True)
    op.create_index(op.f('ix_doctors_verification_status'), 'doctors', ['verification_status'], unique=False)

    op.create_table(
        'doctor_documents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('doctor_id', sa.Integer(), nullable=False),
        sa.Column('document_url', sa.String(), nullable=False),
        sa.Column('document_type', sa.String(), nullable=False),
        sa.Column('public_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['doctor_id'], ['doctors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_doctor_documents_id'), 'doctor_documents', ['id'], unique=False)
    op.create_index(op.f('ix_doctor_documents_doctor_id'), 'doctor_documents', ['doctor_id'], unique=False)

    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('is_initial', sa.Boolean(), nullable=False),
        sa.Column('role', admin_role, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_admins_id'), 'admins', ['id'], unique=False)
    op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)

    op.create_table(
        'articles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('image_public_id', sa.String(), nullable=True),
        sa.Column('category', article_category, nullable=False),
        sa.Column('doctor_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['doctor_id'], ['doctors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_articles_id'), 'articles', ['id'], unique=False)
    op.create_index(op.f('ix_articles_category'), 'articles', ['category'], unique=False)
    op.create_index(op.f('ix_articles_doctor_id'), 'articles', ['doctor_id'], unique=False)
    op.create_index(op.f('ix_articles_created_at'), 'articles', ['created_at'], unique=False)

    for table, constraint in (
        ('article_likes', 'uq_article_likes_article_user'),
        ('article_bookmarks', 'uq_article_bookmarks_article_user'),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('article_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
            sa.ForeignKeyConstraint(['article_id'], ['articles.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('article_id', 'user_id', name=constraint)
        )
        op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)

    op.create_table(
        'forms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('doctor_id', sa.Integer(), nullable=False),
        sa.Column('status', form_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['doctor_id'], ['doctors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('doctor_id')
    )
    op.create_index(op.f('ix_forms_id'), 'forms', ['id'], unique=False)

    op.create_table(
        'form_questions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('form_id', sa.Integer(), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('status', question_status, nullable=False),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_form_questions_id'), 'form_questions', ['id'], unique=False)
    op.create_index(op.f('ix_form_questions_form_id'), 'form_questions', ['form_id'], unique=False)

    op.create_table(
        'notification_jobs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipient', sa.String(), nullable=False),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('template_name', sa.String(), nullable=False),
        sa.Column('context', sa.JSON(), nullable=True),
        sa.Column('status', notification_status, nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notification_jobs_id'), 'notification_jobs', ['id'], unique=False)
    op.create_index(op.f('ix_notification_jobs_recipient'), 'notification_jobs', ['recipient'], unique=False)
    op.create_index(op.f('ix_notification_jobs_status'), 'notification_jobs', ['status'], unique=False)


def downgrade() -> None:
    op.drop_table('notification_jobs')
    op.drop_table('form_questions')
    op.drop_table('forms')
    op.drop_table('article_bookmarks')
    op.drop_table('article_likes')
    op.drop_table('articles')
    op.drop_table('admins')
    op.drop_table('doctor_documents')
    op.drop_table('doctors')
    op.drop_table('users')

    # Enum types outlive their tables on PostgreSQL
    bind = op.get_bind()
    for enum_type in (
        notification_status, question_status, form_status,
        article_category, admin_role, verification_status
    ):
        enum_type.drop(bind, checkfirst=True)
