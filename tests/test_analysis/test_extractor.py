"""Tests for key-lookup call extraction."""

from hypothesis import given, settings
from hypothesis import strategies as st

from i18n_audit.analysis.extractor import resolve_key_with_namespace
from i18n_audit.models.enums import CalleeKind

segment = st.text(alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_", min_size=1, max_size=8)
dotted = st.lists(segment, min_size=1, max_size=4).map(".".join)


class TestResolveKeyWithNamespace:
    """Test namespace qualification of raw keys."""

    def test_qualifies_short_key(self):
        """A short key is prefixed with the namespace."""
        assert resolve_key_with_namespace("title", "Header") == "Header.title"

    def test_no_namespace(self):
        """Root translators and unknown namespaces keep the raw key."""
        assert resolve_key_with_namespace("Header.title", "") == "Header.title"
        assert resolve_key_with_namespace("Header.title", None) == "Header.title"

    def test_already_prefixed_key(self):
        """A key already starting with the namespace is not prefixed twice."""
        assert resolve_key_with_namespace("Header.title", "Header") == "Header.title"
        assert resolve_key_with_namespace("Header", "Header") == "Header"

    def test_similar_prefix_is_not_a_namespace_match(self):
        """Only whole segments count as a prefix."""
        assert resolve_key_with_namespace("HeaderBar.title", "Header") == "Header.HeaderBar.title"

    @given(namespace=dotted, suffix=dotted)
    @settings(max_examples=100, deadline=None)
    def test_prefixed_keys_are_unchanged(self, namespace: str, suffix: str) -> None:
        """Keys under the namespace resolve to themselves."""
        key = f"{namespace}.{suffix}"
        assert resolve_key_with_namespace(key, namespace) == key

    @given(namespace=dotted, key=dotted)
    @settings(max_examples=100, deadline=None)
    def test_resolution_is_idempotent(self, namespace: str, key: str) -> None:
        """Resolving an already resolved key changes nothing."""
        once = resolve_key_with_namespace(key, namespace)
        assert resolve_key_with_namespace(once, namespace) == once
        assert once == namespace or once.startswith(namespace + ".")


class TestKeyCallExtractor:
    """Test which calls become call sites."""

    def test_direct_translation_call_without_namespace(self, extract_keys):
        """A configured function name called with a literal is a lookup."""
        assert extract_keys("t('Common.save');") == ["Common.save"]

    def test_i18n_member_call(self, extract_keys):
        """i18n.t('key') is recognised by the member name."""
        assert extract_keys("i18n.t('common.ok');") == ["common.ok"]

    def test_unknown_callee_ignored(self, extract_keys):
        """Calls to unrelated functions are not lookups."""
        assert extract_keys("fetch('/api');\nconsole.log('hello');\nfoo.bar('baz');") == []

    def test_namespaced_translator_with_custom_name(self, extract_keys):
        """Any name bound to a namespace is a translator."""
        assert extract_keys("const tr = useTranslations('A');\ntr('b');") == ["A.b"]

    def test_dynamic_keys_skipped(self, extract_keys):
        """Only literal keys are extracted."""
        source = """
        const t = useTranslations('Nav');
        t(key);
        t(`items.${id}`);
        t('');
        t('static');
        """
        assert extract_keys(source) == ["Nav.static"]

    def test_template_literal_key(self, extract_keys):
        """A template string without substitutions is a literal key."""
        assert extract_keys("const t = useTranslations('Nav');\nt(`home`);") == ["Nav.home"]

    def test_namespace_producers_are_not_lookups(self, extract_keys):
        """Hook and factory calls are never reported as keys."""
        source = """
        const t = useTranslations('Header');
        async function load() {
          const m = await getTranslations('Meta');
          return m;
        }
        """
        assert extract_keys(source) == []

    def test_call_sites_record_location_and_kind(self, make_scanner):
        """Call sites carry 1-based lines, 0-based columns and the callee kind."""
        source = "const t = useTranslations('NS');\n  t('a');\nt.rich('b');\n"
        context = make_scanner().extract_sources([("src/page.tsx", source)])

        first, second = context.call_sites
        assert (first.resolved_key, first.raw_key) == ("NS.a", "a")
        assert (first.file, first.line, first.column) == ("src/page.tsx", 2, 2)
        assert first.callee_kind == CalleeKind.IDENTIFIER
        assert second.callee_kind == CalleeKind.MEMBER_EXPRESSION
        assert second.line == 3

    def test_usages_grouped_by_key(self, make_scanner):
        """Every usage of a key is kept, in discovery order."""
        sources = [("a.tsx", "t('k');\nt('k');"), ("b.tsx", "t('k');")]
        context = make_scanner().extract_sources(sources)

        assert [(loc.file, loc.line) for loc in context.key_usages["k"]] == [
            ("a.tsx", 1),
            ("a.tsx", 2),
            ("b.tsx", 1),
        ]
