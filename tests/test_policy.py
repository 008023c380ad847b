import unittest

from core.config_service import Config, GuardedContext
from core.policy_guard import (
    DESTRUCTIVE_COMMANDS,
    DestructiveCommandRule,
    GuardTarget,
    PolicyGuard,
    is_destructive,
)


def make_policy() -> Config:
    return Config(
        guarded_contexts=[
            GuardedContext(name="prod"),
            GuardedContext(name="staging", namespaces=["critical"]),
        ]
    )


class ClassifierTests(unittest.TestCase):
    def test_destructive_commands(self) -> None:
        for command in [
            "delete",
            "apply",
            "patch",
            "replace",
            "scale",
            "rollout",
            "drain",
            "cordon",
            "uncordon",
            "taint",
            "label",
            "annotate",
            "edit",
            "set",
        ]:
            with self.subTest(command):
                self.assertTrue(is_destructive(command))
        self.assertEqual(len(DESTRUCTIVE_COMMANDS), 14)

    def test_read_only_commands(self) -> None:
        for command in ["get", "describe", "logs", "exec", "port-forward", "top", ""]:
            with self.subTest(command):
                self.assertFalse(is_destructive(command))

    def test_exact_case_sensitive_match(self) -> None:
        self.assertFalse(is_destructive("Delete"))
        self.assertFalse(is_destructive("del"))
        self.assertFalse(is_destructive("deletes"))

    def test_set_is_immutable(self) -> None:
        with self.assertRaises(AttributeError):
            DESTRUCTIVE_COMMANDS.add("get")  # type: ignore[attr-defined]


class ProtectionPolicyTests(unittest.TestCase):
    def test_is_context_protected(self) -> None:
        policy = make_policy()
        self.assertTrue(policy.is_context_protected("prod"))
        self.assertTrue(policy.is_context_protected("staging"))
        self.assertFalse(policy.is_context_protected("dev"))
        self.assertFalse(policy.is_context_protected("Prod"))

    def test_all_namespaces_when_unrestricted(self) -> None:
        policy = make_policy()
        for namespace in ["default", "kube-system", "anything"]:
            self.assertTrue(policy.is_namespace_protected("prod", namespace))

    def test_only_listed_namespaces(self) -> None:
        policy = make_policy()
        self.assertTrue(policy.is_namespace_protected("staging", "critical"))
        self.assertFalse(policy.is_namespace_protected("staging", "default"))

    def test_unprotected_context(self) -> None:
        self.assertFalse(make_policy().is_namespace_protected("dev", "default"))

    def test_add_new_context(self) -> None:
        policy = make_policy()
        policy.add_context("dev", ["team-a"])
        self.assertEqual([c.name for c in policy.guarded_contexts], ["prod", "staging", "dev"])
        self.assertTrue(policy.is_namespace_protected("dev", "team-a"))

    def test_add_existing_context_replaces_namespaces(self) -> None:
        policy = make_policy()
        policy.add_context("prod", ["production"])
        self.assertEqual(len(policy.guarded_contexts), 2)
        self.assertEqual(policy.guarded_contexts[0].name, "prod")
        self.assertEqual(policy.guarded_contexts[0].namespaces, ["production"])
        self.assertFalse(policy.is_namespace_protected("prod", "default"))

        policy.add_context("staging", [])
        self.assertTrue(policy.is_namespace_protected("staging", "default"))

    def test_add_context_cleans_namespace_list(self) -> None:
        policy = Config()
        entry = policy.add_context("prod", ["a", " b ", "", "a"])
        self.assertEqual(entry.namespaces, ["a", "b"])

    def test_remove_context(self) -> None:
        policy = make_policy()
        self.assertTrue(policy.remove_context("prod"))
        self.assertFalse(policy.is_context_protected("prod"))
        self.assertEqual(len(policy.guarded_contexts), 1)

    def test_remove_missing_context_leaves_store_unchanged(self) -> None:
        policy = make_policy()
        before = policy.model_dump()
        self.assertFalse(policy.remove_context("missing"))
        self.assertEqual(policy.model_dump(), before)

    def test_duplicate_names_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Config(guarded_contexts=[GuardedContext(name="prod"), GuardedContext(name="prod")])


class PolicyGuardTests(unittest.TestCase):
    def test_blocks_only_when_all_conditions_hold(self) -> None:
        guard = PolicyGuard(make_policy())
        self.assertTrue(guard.blocks(GuardTarget("prod", "default", "delete")))
        self.assertTrue(guard.blocks(GuardTarget("staging", "critical", "apply")))
        self.assertFalse(guard.blocks(GuardTarget("dev", "default", "delete")))
        self.assertFalse(guard.blocks(GuardTarget("staging", "other", "delete")))
        self.assertFalse(guard.blocks(GuardTarget("prod", "default", "get")))

    def test_short_circuits_in_order(self) -> None:
        calls = []

        class Recording(DestructiveCommandRule):
            def matches(self, target: GuardTarget) -> bool:
                calls.append(target.command)
                return super().matches(target)

        policy = make_policy()
        guard = PolicyGuard(policy, rules=PolicyGuard.default_rules(policy)[:2] + [Recording()])
        self.assertFalse(guard.blocks(GuardTarget("dev", "default", "delete")))
        self.assertEqual(calls, [])
        self.assertTrue(guard.blocks(GuardTarget("prod", "default", "delete")))
        self.assertEqual(calls, ["delete"])


if __name__ == "__main__":
    unittest.main()
