# tests/test_task_integration.py
import unittest

from tests.fixtures import EventRecorder, LogCapture, basic_config
from harvest.config import INDICATOR_COLOR_HALF, INDICATOR_OFFSET_Y
from harvest.core.game_context import GameContext
from harvest.core.tasks.catalog import TaskCatalog
from harvest.core.tasks.integration import TaskSystemIntegration
from harvest.utils.logger import Logger, LogLevel

STARTERS = ["cow1", "cow2", "cow3", "cowBaby", "chicken1", "chicken2", "chicken3", "chicken4"]

class TestTaskSystemIntegration(unittest.TestCase):

    def setUp(self):
        """Runs before EVERY test function."""
        # 1. Capture logs
        self.logs = LogCapture()
        self._previous_level = Logger.get_level()
        Logger.set_level(LogLevel.DEBUG)
        Logger.set_sink(self.logs)

        # 2. Scene with two sprites already placed
        self.context = GameContext(scene_name="farm")
        self.context.set_sprite_position("cow1", 200, 300)
        self.context.set_sprite_position("chicken1", 420, 310)

        # 3. Full task system on the shipped catalog
        self.integration = TaskSystemIntegration(self.context)
        self.scene_events = EventRecorder(self.context.events, "task_completed", "task_progress", "animal_interaction")

    def tearDown(self):
        if self.integration.is_system_active():
            self.integration.destroy()
        Logger.set_sink(None)
        Logger.set_level(self._previous_level)

    def message_texts(self):
        return [m.text for m in self.integration.message_display.messages]

    def test_starter_tasks_loaded(self):
        manager = self.integration.task_manager
        self.assertEqual(list(manager.active_tasks), STARTERS)
        self.assertEqual(manager.config["max_completed_tasks"], 50)
        self.assertEqual(len(self.logs.matching("INFO", "Loaded 8 starter tasks")), 1)

        # Already populated, so a second load does nothing
        self.assertEqual(self.integration.load_default_tasks(), [])

    def test_indicators_only_for_placed_sprites(self):
        indicators = self.integration.indicator_manager.indicators
        self.assertEqual(sorted(indicators), ["chicken1", "cow1"])
        cow = indicators["cow1"]
        self.assertEqual((cow.x, cow.y), (200, 300 + INDICATOR_OFFSET_Y))
        self.assertTrue(cow.glowing)
        self.assertEqual(cow.task_type, "animal")

    def test_context_receives_legacy_handles(self):
        self.assertIs(self.context.tasks["manager"], self.integration.manager_proxy)
        self.assertIs(self.context.tasks["ui"], self.integration.ui_proxy)

    def test_interaction_flow(self):
        """Feed then talk: messages, scene events and the indicator follow the task."""
        # 1. Feed
        self.assertFalse(self.integration.handle_animal_interaction("cow1", "feed"))
        self.assertEqual(self.message_texts(), ["You feed cow1!"])
        self.assertEqual(self.integration.indicator_manager.get_indicator("cow1").color, INDICATOR_COLOR_HALF)
        self.assertEqual(len(self.scene_events.of("task_progress")), 1)

        # 2. Talk
        self.assertTrue(self.integration.handle_animal_interaction("cow1", "talk"))
        self.assertEqual(self.message_texts()[-2:], ["You talk cow1!", "cow1 is happy for today!"])
        self.assertIsNone(self.integration.indicator_manager.get_indicator("cow1"))

        completed = self.scene_events.of("task_completed")
        self.assertEqual(len(completed), 1)
        self.assertEqual(completed[0][0].id, "cow1")
        self.assertEqual([args[:2] for args in self.scene_events.of("animal_interaction")],
                         [("cow1", "feed"), ("cow1", "talk")])

    def test_interaction_picks_next_action(self):
        self.integration.handle_animal_interaction("cow2")
        task = self.integration.task_manager.get_task("cow2")
        self.assertEqual(task.get_completed_actions(), ["feed"])

        self.assertTrue(self.integration.handle_animal_interaction("cow2"))

    def test_unneeded_action_shows_warning(self):
        self.integration.handle_animal_interaction("cow1", "feed")
        self.assertFalse(self.integration.handle_animal_interaction("cow1", "feed"))

        last = self.integration.message_display.messages[-1]
        self.assertEqual(last.text, "cow1 doesn't need that right now.")
        self.assertEqual(last.message_type, "warning")

    def test_unknown_animal(self):
        self.assertFalse(self.integration.handle_animal_interaction("horse", "feed"))
        self.assertEqual(self.message_texts(), [])
        self.assertTrue(self.logs.matching("WARN", "Animal task not found: horse"))

    def test_legacy_manager_proxy(self):
        legacy = self.context.tasks["manager"]

        self.assertFalse(legacy.handle_animal_task("chicken1"))
        self.assertEqual(legacy.animal_tasks["chicken1"], {"feed": True, "talk": False})
        self.assertTrue(legacy.handle_animal_task("chicken1"))
        self.assertNotIn("chicken1", legacy.animal_tasks)
        self.assertFalse(legacy.has_active_tasks_for_target("chicken1"))
        self.assertFalse(legacy.handle_animal_task("chicken1"))

        progress = legacy.get_progress()
        self.assertEqual((progress["completed"], progress["total"]), (1, 8))
        self.assertEqual(len(legacy.get_active_tasks()), 7)

    def test_all_animals_complete(self):
        legacy = self.context.tasks["manager"]
        self.assertFalse(legacy.are_all_animals_complete())

        for task_id in STARTERS:
            while legacy.has_active_tasks_for_target(task_id):
                legacy.handle_animal_task(task_id)

        self.assertTrue(legacy.are_all_animals_complete())
        self.assertEqual(legacy.get_progress()["percentage"], 100)

    def test_legacy_scene_and_messages(self):
        legacy = self.context.tasks["manager"]
        legacy.update_scene("barn")
        self.assertEqual(self.context.scene_name, "barn")
        self.assertEqual(self.context.previous_scene, "farm")

        legacy.show_message("Hello")
        self.assertEqual(self.message_texts(), ["Hello"])

        legacy.remove_indicator("cow1")
        self.assertIsNone(self.integration.indicator_manager.get_indicator("cow1"))

    def test_compatible_views(self):
        self.integration.handle_animal_interaction("cowBaby", "pet")

        progress = self.integration.get_compatible_progress()
        self.assertEqual(set(progress), {"completed", "total", "percentage"})

        rows = self.integration.get_compatible_active_tasks()
        self.assertEqual(rows[0], {"id": "cowBaby", "instruction": "cowBaby: feed and talk", "type": "animal"})
        self.assertEqual(len(rows), 8)

    def test_add_task_creates_indicator(self):
        self.context.set_sprite_position("scarecrow", 50, 60)
        task = self.integration.add_task(basic_config("scarecrow", title="Fix the scarecrow"))

        self.assertIs(self.integration.task_manager.get_task("scarecrow"), task)
        self.assertIsNotNone(self.integration.indicator_manager.get_indicator("scarecrow"))

    def test_sync_indicators(self):
        self.context.set_sprite_position("cow2", 10, 10)
        self.integration.task_manager.remove_task("chicken1")

        self.integration.sync_indicators_with_tasks()

        self.assertEqual(sorted(self.integration.indicator_manager.indicators), ["cow1", "cow2"])

    def test_panel_toggle_tracks_menu_state(self):
        ui = self.context.tasks["ui"]
        self.assertTrue(self.integration.toggle_ui())
        self.assertTrue(self.context.task_menu_open)
        self.assertTrue(ui.get_visibility())

        self.assertFalse(ui.toggle())
        self.assertFalse(self.context.task_menu_open)

    def test_panel_refreshes_on_progress(self):
        panel = self.integration.task_ui
        self.assertEqual(panel.header_text(), "Tasks 0/8 (0%)")

        self.integration.handle_animal_interaction("cow1", "feed")
        self.integration.handle_animal_interaction("cow1", "talk")

        self.assertEqual(panel.header_text(), "Tasks 1/8 (13%)")
        self.assertNotIn("cow1", [row["id"] for row in panel.rows])

    def test_messages_expire(self):
        self.integration.show_task_message("Hello")
        self.integration.update(1.0)
        self.assertEqual(self.message_texts(), ["Hello"])
        self.integration.update(5.0)
        self.assertEqual(self.message_texts(), [])

    def test_destroy(self):
        self.integration.destroy()

        self.assertIsNone(self.context.tasks)
        self.assertFalse(self.integration.is_system_active())
        self.assertEqual(self.integration.indicator_manager.indicators, {})
        self.assertEqual(self.integration.task_manager.event_names(), [])

class TestIntegrationWithCustomCatalog(unittest.TestCase):

    def setUp(self):
        self.logs = LogCapture()
        Logger.set_sink(self.logs)

    def tearDown(self):
        Logger.set_sink(None)

    def test_custom_catalog_and_manager_config(self):
        catalog = TaskCatalog(templates={
            "cow1": {"kind": "animal", "title": "Cow", "category": "animals", "description": ""},
        })
        context = GameContext()
        integration = TaskSystemIntegration(context, catalog=catalog,
                                            manager_config={"max_completed_tasks": 5, "enable_logging": False})

        # Only starter ids present in this catalog are built
        self.assertEqual(list(integration.task_manager.active_tasks), ["cow1"])
        self.assertEqual(integration.task_manager.config["max_completed_tasks"], 5)
        integration.destroy()

    def test_reloaded_starters_report_progress_once(self):
        catalog = TaskCatalog(templates={
            "cow1": {"kind": "animal", "title": "Cow", "category": "animals", "description": ""},
        })
        context = GameContext()
        integration = TaskSystemIntegration(context, catalog=catalog)
        progress = EventRecorder(context.events, "task_progress")

        for _day in range(3):
            integration.handle_animal_interaction("cow1", "feed")
            integration.handle_animal_interaction("cow1", "talk")
            self.assertEqual([t.id for t in integration.load_default_tasks()], ["cow1"])

        integration.handle_animal_interaction("cow1", "feed")
        self.assertEqual(len(progress.of("task_progress")), 7)
        integration.destroy()

    def test_without_defaults(self):
        context = GameContext()
        integration = TaskSystemIntegration(context, load_defaults=False)
        self.assertEqual(integration.task_manager.active_tasks, {})
        self.assertEqual(integration.task_ui.row_lines(), ["All tasks completed!"])
        integration.destroy()

if __name__ == '__main__':
    unittest.main()
