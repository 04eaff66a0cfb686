#!/usr/bin/env python3
"""
Unit tests for marker comment matching.
"""

import unittest

from izumi.codegen import Marker, MarkerMatch, Scope, match_markers


class TestMarkerDetection(unittest.TestCase):
    """Test which markers are recognised in comment text."""

    def test_no_markers(self):
        """Plain comments carry no markers."""
        result = match_markers("# just a comment")

        self.assertEqual(result.markers, frozenset())
        self.assertFalse(result)
        self.assertIsNone(result.scope)

    def test_empty_text(self):
        """Empty comment text yields an empty match."""
        self.assertEqual(match_markers(""), MarkerMatch())

    def test_each_marker_alone(self):
        """Each marker is detected on its own."""
        cases = {
            "# @Token": Marker.TOKEN,
            "# @Injectable": Marker.INJECTABLE,
            "# @Depends": Marker.DEPENDS,
            "# @Reflect": Marker.REFLECT,
        }
        for text, marker in cases.items():
            with self.subTest(text=text):
                self.assertEqual(match_markers(text).markers, frozenset({marker}))

    def test_markers_combine(self):
        """One comment block may carry several markers at once."""
        text = "\n".join(["# @Token", "# @Reflect", "# @Injectable", '# @Scope("singleton")'])
        result = match_markers(text)

        self.assertEqual(
            result.markers,
            frozenset({Marker.TOKEN, Marker.REFLECT, Marker.INJECTABLE, Marker.SCOPE}),
        )
        self.assertTrue(result.is_token)
        self.assertTrue(result.is_reflect)
        self.assertTrue(result.is_injectable)
        self.assertFalse(result.is_depends)
        self.assertEqual(result.scope, Scope.SINGLETON)

    def test_case_insensitive(self):
        """Marker names are matched without regard to case."""
        result = match_markers("# @token @INJECTABLE @depends")

        self.assertTrue(result.is_token)
        self.assertTrue(result.is_injectable)
        self.assertTrue(result.is_depends)

    def test_wants_registration(self):
        """Either @Injectable or @Depends requests registration."""
        self.assertTrue(match_markers("# @Injectable").wants_registration)
        self.assertTrue(match_markers("# @Depends").wants_registration)
        self.assertFalse(match_markers("# @Token").wants_registration)


class TestScopeExtraction(unittest.TestCase):
    """Test scope marker parsing."""

    def test_scope_values(self):
        """All three scope names are captured, in either quote style."""
        cases = {
            '# @Scope("singleton")': Scope.SINGLETON,
            "# @Scope('scoped')": Scope.SCOPED,
            '# @Scope( "transient" )': Scope.TRANSIENT,
            '# @scope("SINGLETON")': Scope.SINGLETON,
        }
        for text, scope in cases.items():
            with self.subTest(text=text):
                result = match_markers(text)
                self.assertEqual(result.scope, scope)
                self.assertTrue(result.has(Marker.SCOPE))

    def test_unknown_scope_is_not_a_match(self):
        """An unrecognised scope value falls back to transient."""
        result = match_markers('# @Injectable\n# @Scope("request")')

        self.assertFalse(result.has(Marker.SCOPE))
        self.assertIsNone(result.scope)
        self.assertEqual(result.scope_or_default(), Scope.TRANSIENT)

    def test_scope_without_call_syntax(self):
        """A bare @Scope without a value is ignored."""
        self.assertIsNone(match_markers("# @Scope singleton").scope)

    def test_default_scope(self):
        """Without a scope marker the default is transient."""
        self.assertEqual(match_markers("# @Injectable").scope_or_default(), Scope.TRANSIENT)


if __name__ == "__main__":
    unittest.main()
