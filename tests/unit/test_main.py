#!/usr/bin/env python3
"""
Unit tests for the command line entry point and service wiring.

assignment_uow is patched to yield the in-memory repository, so the
commands run end to end without a database.
"""

import contextlib
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import main
from core.app_context import AppContext
from core.config_loader import AppConfig, merge_algorithm_config
from core.enums import OfferResponse, TaskStatus
from core.assignment.offers import OfferLifecycleManager
from tests.mocks.assignment_mocks import FakeAssignmentRepository, make_artist, make_task


def fake_uow(repo):
    @contextlib.contextmanager
    def uow():
        yield repo
    return uow


class TestAppContext(unittest.TestCase):

    def test_services_share_one_config_provider(self):
        config = AppConfig(
            database={'url': 'postgresql://localhost/test'},
            assignment={'algorithm': {'workload_settings': {'max_active_tasks': 8}}},
        )
        services = AppContext(config=config).services(FakeAssignmentRepository())

        self.assertIs(services.ranking.config_provider, services.config_provider)
        self.assertIs(services.offers.config_provider, services.config_provider)
        self.assertIs(services.escalation.offers, services.offers)
        self.assertIsInstance(services.offers, OfferLifecycleManager)
        self.assertEqual(
            services.config_provider.get_active_config(),
            merge_algorithm_config({'workload_settings': {'max_active_tasks': 8}})
        )


class TestParser(unittest.TestCase):

    def test_respond_arguments(self):
        args = main.build_parser().parse_args(
            ['respond', 'task-1', 'artist-1', 'REJECTED', '--reason', 'TOO_BUSY']
        )
        self.assertEqual(args.func, main.cmd_respond)
        self.assertEqual(args.response, 'REJECTED')
        self.assertEqual(args.reason, 'TOO_BUSY')
        self.assertIsNone(args.note)

    def test_rank_defaults(self):
        args = main.build_parser().parse_args(['rank', 'task-1'])
        self.assertEqual(args.level, 1)
        self.assertEqual(args.top, 10)

    def test_unknown_response_rejected(self):
        with self.assertRaises(SystemExit):
            main.build_parser().parse_args(['respond', 'task-1', 'artist-1', 'MAYBE'])


class TestRespondCommand(unittest.TestCase):

    def setUp(self):
        self.now = datetime.now(timezone.utc)
        self.context = AppContext(config=AppConfig(database={'url': 'postgresql://localhost/test'}))
        self.repo = FakeAssignmentRepository(artists=[make_artist("artist-1"), make_artist("artist-2")])
        self.repo.tasks.task_data["task-1"] = make_task("task-1", deadline=self.now + timedelta(days=10))
        self.repo.offers.add_existing(
            "task-1", "artist-1", offered_at=self.now, expires_at=self.now + timedelta(hours=2)
        )

    def run_respond(self, response):
        args = main.build_parser().parse_args(['respond', 'task-1', 'artist-1', response])
        with patch.object(main, 'assignment_uow', fake_uow(self.repo)):
            main.cmd_respond(self.context, args)

    def test_accept_assigns_task_with_working_deadline(self):
        self.run_respond('ACCEPTED')

        state = self.repo.tasks.states["task-1"]
        self.assertEqual(state['status'], TaskStatus.ASSIGNED)
        self.assertEqual(state['freelancer_id'], "artist-1")
        window = self.repo.tasks.task_data["task-1"].deadline - state['assigned_at']
        self.assertAlmostEqual(
            state['working_deadline'], state['assigned_at'] + window * 0.7, delta=timedelta(milliseconds=1)
        )
        self.assertIn("artist-1", self.repo.freelancers.saved_metrics)

    def test_reject_offers_next_artist(self):
        self.run_respond('REJECTED')

        self.assertEqual(self.repo.offers.offers[0].response, OfferResponse.REJECTED.value)
        state = self.repo.tasks.states["task-1"]
        self.assertEqual(state['status'], TaskStatus.OFFERED)
        self.assertEqual(state['offered_to'], "artist-2")

    def test_missing_offer_returns_error_code(self):
        with patch.object(main, 'assignment_uow', fake_uow(self.repo)):
            with patch.object(main, 'load_config', return_value=self.context.config):
                with patch.object(main, 'configure_database'):
                    code = main.main(['respond', 'task-9', 'artist-1', 'ACCEPTED'])
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
