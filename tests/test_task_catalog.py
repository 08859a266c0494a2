# tests/test_task_catalog.py
import json
import os
import tempfile
import unittest

from tests.fixtures import LogCapture
from harvest.core.tasks.animal_task import AnimalTask
from harvest.core.tasks.catalog import TaskCatalog, load_task_templates, resolve_priority
from harvest.utils.logger import Logger

class TestTaskCatalog(unittest.TestCase):

    def setUp(self):
        self.logs = LogCapture()
        Logger.set_sink(self.logs)
        self.catalog = TaskCatalog()

    def tearDown(self):
        Logger.set_sink(None)

    def test_shipped_catalog_has_starter_set(self):
        starters = self.catalog.get_starter_tasks()
        self.assertEqual(starters, ["cow1", "cow2", "cow3", "cowBaby",
                                    "chicken1", "chicken2", "chicken3", "chicken4"])
        for task_id in starters:
            self.assertIsNotNone(self.catalog.get_task_config(task_id), task_id)

    def test_records_are_valid(self):
        for task_id, record in self.catalog.get_animal_task_configs().items():
            self.assertTrue(self.catalog.validate_task_config(record), task_id)
        self.assertFalse(self.catalog.validate_task_config({"kind": "animal", "title": "x"}))

    def test_lookup_returns_copies(self):
        record = self.catalog.get_task_config("cow1")
        record["title"] = "Changed"
        record["required_actions"].append("dance")

        fresh = self.catalog.get_task_config("cow1")
        self.assertEqual(fresh["title"], "Care for Cow #1")
        self.assertEqual(fresh["required_actions"], ["feed", "talk"])

    def test_unknown_id(self):
        self.assertIsNone(self.catalog.get_task_config("horse"))
        self.assertIsNone(self.catalog.to_task_config("horse"))

    def test_queries_by_category_and_priority(self):
        animals = self.catalog.get_tasks_by_category("animals")
        self.assertEqual(len(animals), 8)
        self.assertEqual(self.catalog.get_tasks_by_category("crops"), [])

        high = self.catalog.get_tasks_by_priority("high")
        self.assertEqual([t["id"] for t in high], ["cowBaby"])

    def test_category_priority_and_settings_info(self):
        self.assertEqual(self.catalog.get_category_info("animals")["name"], "Animal Care")
        self.assertIsNone(self.catalog.get_category_info("crops"))
        self.assertEqual(self.catalog.get_priority_info("urgent")["value"], 4)
        self.assertTrue(self.catalog.get_settings()["enable_task_priorities"])

    def test_to_task_config_resolves_priority_names(self):
        config = self.catalog.to_task_config("cowBaby")
        self.assertEqual(config.kind, "animal")
        self.assertEqual(config.task_id, "cowBaby")
        self.assertEqual(config.fields["priority"], 3)
        self.assertEqual(resolve_priority("normal"), 2)
        self.assertEqual(resolve_priority(4), 4)
        self.assertEqual(resolve_priority("whenever"), 0)

    def test_create_tasks_from_config_skips_missing(self):
        tasks = self.catalog.create_tasks_from_config(["cow1", "horse", "cowBaby"])
        self.assertEqual([t.id for t in tasks], ["cow1", "cowBaby"])
        self.assertIsInstance(tasks[1], AnimalTask)
        self.assertEqual(tasks[1].required_actions, ["feed", "talk", "pet"])
        self.assertEqual(tasks[1].location, "cow-shed")
        self.assertEqual(tasks[1].rewards["gold"], 75)
        self.assertEqual(len(self.logs.matching("WARN", "horse")), 1)

    def test_create_tasks_from_config_skips_broken_records(self):
        catalog = TaskCatalog(templates={
            "good": {"kind": "animal", "title": "Good", "category": "animals", "description": ""},
            "bad_kind": {"kind": "dragon", "title": "Bad", "category": "animals", "description": ""},
            "no_title": {"kind": "basic", "category": "animals", "description": ""},
        })
        tasks = catalog.create_tasks_from_config(["good", "bad_kind", "no_title"])
        self.assertEqual([t.id for t in tasks], ["good"])
        self.assertEqual(len(self.logs.matching("ERROR", "Failed to create task")), 2)

    def test_loader_reads_json_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "extra.json"), "w", encoding="utf-8") as f:
                json.dump({"sheep1": {"kind": "animal", "title": "Shear"}}, f)
            with open(os.path.join(tmp, "broken.json"), "w", encoding="utf-8") as f:
                f.write("{not json")

            templates = load_task_templates(tmp, ["extra.json", "broken.json", "missing.json"])

        self.assertEqual(list(templates.keys()), ["sheep1"])
        self.assertEqual(len(self.logs.matching("ERROR", "broken.json")), 1)
        self.assertEqual(len(self.logs.matching("WARN", "missing.json")), 1)
