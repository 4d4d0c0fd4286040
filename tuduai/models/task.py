from tortoise import fields, models
import uuid

from tuduai.schemas.task import Category, Priority


class Task(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user_id = fields.UUIDField(description="Владелец задачи")
    title = fields.TextField()
    description = fields.TextField(null=True)
    priority = fields.CharEnumField(Priority, max_length=10, default=Priority.MEDIUM)
    category = fields.CharEnumField(Category, max_length=10, default=Category.OTHER)
    due_date = fields.DatetimeField(null=True)

    completed = fields.BooleanField(default=False, description="Статус выполнения")
    completed_at = fields.DatetimeField(null=True)
    tags = fields.JSONField(default=list)

    # Как была получена задача: моделью или правилами, и исходный текст
    ai_parsed = fields.BooleanField(default=False)
    original_input = fields.TextField(null=True)

    # Временные метки
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "tasks"
        indexes = [
            models.Index(fields=["user_id"], name="idx_tasks_user_id"),
            models.Index(fields=["due_date"], name="idx_tasks_due_date"),
            models.Index(fields=["completed"], name="idx_tasks_completed"),
            models.Index(fields=["created_at"], name="idx_tasks_created_at"),
            models.Index(fields=["priority"], name="idx_tasks_priority"),
            models.Index(fields=["category"], name="idx_tasks_category"),
            models.Index(fields=["user_id", "completed"], name="idx_tasks_user_completed"),
        ]
