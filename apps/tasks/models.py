import uuid
from django.db import models

TITLE_MAX_LENGTH = 200


class Task(models.Model):
    """
    A unit of work assigned to a user with a due date.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    description = models.TextField(blank=True, default="")

    # No FK - modular boundary. Deleting a user leaves its tasks in place.
    assignee_id = models.UUIDField(db_index=True)  # Linked to Identity User

    due_date = models.DateTimeField(db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['due_date', 'id']

    def __str__(self):
        return self.title
