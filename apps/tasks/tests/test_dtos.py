from django.test import SimpleTestCase

from apps.tasks.dtos import SortField, TaskOrdering


class TaskOrderingTest(SimpleTestCase):

    def test_defaults_to_due_date_ascending(self):
        self.assertEqual(TaskOrdering.parse(None, None), TaskOrdering(SortField.DUE_DATE, False))

    def test_parses_known_values(self):
        self.assertEqual(TaskOrdering.parse('assignee', 'desc'), TaskOrdering(SortField.ASSIGNEE, True))
        self.assertEqual(TaskOrdering.parse(' TITLE ', 'Asc'), TaskOrdering(SortField.TITLE, False))

    def test_unknown_field_or_order_falls_back(self):
        self.assertEqual(TaskOrdering.parse('priority', 'asc'), TaskOrdering())
        self.assertEqual(TaskOrdering.parse('title', 'random'), TaskOrdering())
