"""Tests for translators forwarded through JSX props."""

from i18n_audit.analysis.context import AnalysisContext
from i18n_audit.models.enums import IssueType


class TestSameFileForwarding:
    """Test components defined in the analysed file."""

    def test_destructured_prop(self, extract_keys):
        """The child's destructured parameter takes the parent's namespace."""
        source = """
        function Child({ t }) {
          return <span>{t('label')}</span>;
        }
        export default function Page() {
          const t = useTranslations('Page');
          return <Child t={t} />;
        }
        """
        assert extract_keys(source) == ["Page.label"]

    def test_renamed_prop(self, extract_keys):
        """The prop name is matched, not the local name."""
        source = """
        const Child = ({ translate: tr }) => <span>{tr('label')}</span>;
        export default function Page() {
          const t = useTranslations('Page');
          return <Child translate={t} />;
        }
        """
        assert extract_keys(source) == ["Page.label"]

    def test_props_member_call(self, extract_keys):
        """props.t('key') uses the namespace forwarded as the t prop."""
        source = """
        function Child(props) {
          return <span>{props.t('label')}</span>;
        }
        function Page() {
          const t = useTranslations('Page');
          return <Child t={t} />;
        }
        """
        assert extract_keys(source) == ["Page.label"]

    def test_props_destructured_in_body(self, extract_keys):
        """const { t } = props picks up the forwarded namespace."""
        source = """
        function Child(props) {
          const { t } = props;
          return <span>{t('label')}</span>;
        }
        function Page() {
          const t = useTranslations('Page');
          return <Child t={t} />;
        }
        """
        assert extract_keys(source) == ["Page.label"]

    def test_memo_wrapped_child(self, extract_keys):
        """Components wrapped in memo() are located."""
        source = """
        const Child = memo(({ t }) => <span>{t('label')}</span>);
        function Page() {
          const t = useTranslations('Page');
          return <Child t={t} />;
        }
        """
        assert extract_keys(source) == ["Page.label"]

    def test_linear_chain_resolves_within_depth_passes(self, make_scanner):
        """A chain of n forwards settles in at most n passes."""
        source = """
        function Grandchild({ t }) {
          return <p>{t('title')}</p>;
        }
        function Child({ t }) {
          return <Grandchild t={t} />;
        }
        function Parent({ t }) {
          return <Child t={t} />;
        }
        export default function Page() {
          const t = useTranslations('Page');
          return <Parent t={t} />;
        }
        """
        scanner = make_scanner()
        context = AnalysisContext()
        context.merge(scanner.analyze_file("page.tsx", source))

        passes = scanner.deferred_resolver.run(context)
        for analysis in context.files:
            scanner.extractor.finalize(analysis, context)

        assert passes <= 3
        assert context.translation_keys == ["Page.title"]

    def test_forward_through_props_member(self, extract_keys):
        """A component may forward props.t further down."""
        source = """
        function Leaf({ t }) {
          return <p>{t('leaf')}</p>;
        }
        function Middle(props) {
          return <Leaf t={props.t} />;
        }
        function Page() {
          const t = useTranslations('Page');
          return <Middle t={t} />;
        }
        """
        assert extract_keys(source) == ["Page.leaf"]


class TestCrossFileForwarding:
    """Test components imported from other analysed files."""

    def test_imported_component(self, extract_keys):
        """The producer's file may be analysed before or after the component's."""
        page = """
        import { Child } from './Child';
        export default function Page() {
          const t = useTranslations('Page');
          return <Child t={t} />;
        }
        """
        child = """
        export function Child({ t }) {
          return <span>{t('label')}</span>;
        }
        """
        assert extract_keys({"page.tsx": page, "Child.tsx": child}) == ["Page.label"]
        assert extract_keys({"Child.tsx": child, "page.tsx": page}) == ["Page.label"]

    def test_aliased_import(self, extract_keys):
        """The exported name is used to locate the component."""
        page = """
        import { Child as Item } from './Child';
        function Page() {
          const t = useTranslations('List');
          return <Item t={t} />;
        }
        """
        child = "export const Child = ({ t }) => <li>{t('entry')}</li>;"
        assert extract_keys({"page.tsx": page, "Child.tsx": child}) == ["List.entry"]

    def test_ambiguous_component_name_left_unresolved(self, extract_keys):
        """Two candidate definitions are not guessed between."""
        page = """
        import { Child } from './Child';
        function Page() {
          const t = useTranslations('Page');
          return <Child t={t} />;
        }
        """
        child_a = "export function Child({ t }) { return t('a'); }"
        child_b = "export function Child({ t }) { return t('b'); }"
        keys = extract_keys({"page.tsx": page, "a.tsx": child_a, "b.tsx": child_b})
        assert keys == ["a", "b"]

    def test_default_import_under_another_name(self, extract_keys):
        """A default import is located through its module, not its local name."""
        page = """
        import Foo from './Child';
        export default function Page() {
          const t = useTranslations('Page');
          return <Foo t={t} />;
        }
        """
        child = """
        export default function Child({ t }) {
          return <span>{t('label')}</span>;
        }
        """
        assert extract_keys({"page.tsx": page, "Child.tsx": child}) == ["Page.label"]

    def test_default_import_of_wrapped_component(self, extract_keys):
        """``export default memo(Child)`` exports Child."""
        page = """
        import Row from './Row';
        function Table() {
          const t = useTranslations('Table');
          return <Row t={t} />;
        }
        """
        row = """
        const Row = ({ t }) => <tr>{t('cell')}</tr>;
        export default memo(Row);
        """
        assert extract_keys({"Table.tsx": page, "Row.tsx": row}) == ["Table.cell"]

    def test_default_import_picks_the_imported_module(self, extract_keys):
        """The relative specifier chooses between same-named default exports."""
        page = """
        import Card from '../components/Card';
        export default function Home() {
          const t = useTranslations('Home');
          return <Card t={t} />;
        }
        """
        card = "export default function Card({ t }) { return t('fresh'); }"
        legacy = "export default function Card({ t }) { return t('stale'); }"
        sources = {
            "src/app/page.tsx": page,
            "src/components/Card.tsx": card,
            "src/legacy/Card.tsx": legacy,
        }
        assert extract_keys(sources) == ["Home.fresh", "stale"]

    def test_default_import_through_path_alias(self, extract_keys):
        """``@/`` specifiers match modules by trailing path, including index files."""
        page = """
        import Banner from '@/components/Banner';
        export default function Home() {
          const t = useTranslations('Home');
          return <Banner t={t} />;
        }
        """
        banner = "export default function Banner({ t }) { return <p>{t('promo')}</p>; }"
        sources = {"src/app/page.tsx": page, "src/components/Banner/index.tsx": banner}
        assert extract_keys(sources) == ["Home.promo"]


class TestUnresolvedForwards:
    """Test forwards whose component cannot be located."""

    SOURCE = """
    import { Widget } from 'external-lib';
    function Page() {
      const t = useTranslations('Page');
      return <Widget t={t} />;
    }
    """

    def test_dropped_silently_by_default(self, make_scanner):
        """Unresolved forwards do not produce entries."""
        context = make_scanner().extract_sources([("page.tsx", self.SOURCE)])
        assert context.warnings == []
        assert context.errors == []

    def test_warning_when_enabled(self, make_scanner):
        """With reporting on, an unresolved forward becomes a warning."""
        scanner = make_scanner(report_unresolved_jsx=True)
        context = scanner.extract_sources([("page.tsx", self.SOURCE)])

        (warning,) = context.warnings
        assert warning.type == IssueType.UNRESOLVED_JSX_PROP
        assert warning.file == "page.tsx"
        assert "Widget" in warning.message
        assert not warning.is_error
