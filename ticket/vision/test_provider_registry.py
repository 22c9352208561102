"""
Tests for the provider registry and the multi-provider comparison
"""
from ticket.models import ExtractionResult, ProviderDescriptor, TicketFields
from ticket.vision import (
    VisionProviderRegistry,
    compare_results,
    run_provider_comparison,
    GEMINI_PROVIDER,
    OPENAI_PROVIDER,
)


class StubProvider:
    def __init__(self, name, connected=True, fields=None, error=None):
        self.name = name
        self.connected = connected
        self.fields = fields
        self.error = error
        self.extracted = []

    def extract_ticket_data(self, image_path):
        self.extracted.append(image_path)
        if self.fields is None:
            return ExtractionResult.failure("nothing read", provider_name=self.name)
        return ExtractionResult.ok(self.fields, provider_name=self.name)

    def test_connection(self):
        if self.error:
            raise self.error
        return self.connected


class StubConfig:
    def __init__(self, names, default_provider=GEMINI_PROVIDER):
        self.names = names
        self.default_provider = default_provider

    def provider_descriptors(self):
        return [ProviderDescriptor(name=name, api_key="key") for name in self.names]


def stub_factories():
    return {
        OPENAI_PROVIDER: lambda d: StubProvider(d.name),
        GEMINI_PROVIDER: lambda d: StubProvider(d.name),
    }


def test_default_provider_is_active_when_configured():
    registry = VisionProviderRegistry(StubConfig([OPENAI_PROVIDER, GEMINI_PROVIDER]), stub_factories())
    assert registry.active_provider_name == GEMINI_PROVIDER
    assert registry.get_all_provider_names() == [OPENAI_PROVIDER, GEMINI_PROVIDER]


def test_first_registered_is_active_without_default():
    registry = VisionProviderRegistry(StubConfig([OPENAI_PROVIDER]), stub_factories())
    assert registry.get_active_provider().name == OPENAI_PROVIDER


def test_empty_registry_has_no_active_provider():
    registry = VisionProviderRegistry(StubConfig([]), stub_factories())
    assert registry.get_active_provider() is None
    assert registry.test_all_providers() == {}


def test_set_active_provider_only_accepts_registered_names():
    registry = VisionProviderRegistry()
    registry.register_provider(StubProvider("A"))
    registry.register_provider(StubProvider("B"))

    assert registry.set_active_provider("B") is True
    assert registry.set_active_provider("Nope") is False
    assert registry.active_provider_name == "B"


def test_removing_active_provider_falls_back():
    registry = VisionProviderRegistry()
    registry.register_provider(StubProvider("A"))
    registry.register_provider(StubProvider("B"))

    registry.remove_provider("A")

    assert registry.active_provider_name == "B"
    assert registry.get_provider("A") is None


def test_test_all_providers_treats_errors_as_disconnected():
    registry = VisionProviderRegistry()
    registry.register_provider(StubProvider("up"))
    registry.register_provider(StubProvider("down", connected=False))
    registry.register_provider(StubProvider("broken", error=RuntimeError("boom")))

    assert registry.test_all_providers() == {'up': True, 'down': False, 'broken': False}


def test_provider_comparison_agreement(tmp_path):
    (tmp_path / "a.jpg").write_bytes(b"img")
    (tmp_path / "notes.txt").write_text("skip me")
    registry = VisionProviderRegistry()
    registry.register_provider(StubProvider("one", fields=TicketFields(movie_title="Wonka", seat_number="L6")))
    registry.register_provider(StubProvider("two", fields=TicketFields(movie_title="Wonka", seat_number="L7")))
    registry.register_provider(StubProvider("offline", connected=False))

    results = run_provider_comparison(registry, tmp_path)
    analysis = compare_results(results)

    assert results['offline'] == {'connected': False, 'error': 'Failed connection test'}
    assert [r['imageName'] for r in results['one']['results']] == ['a.jpg']
    assert analysis['connectedCount'] == 2
    agreement = analysis['imageComparisons'][0]['fieldAgreement']
    assert agreement['movieTitle'] == {'value': 'Wonka', 'agreement': '100.0%', 'providers': 2}
    assert agreement['seatNumber']['agreement'] == '50.0%'
    assert agreement['price']['providers'] == 0


def test_provider_comparison_without_images(tmp_path):
    registry = VisionProviderRegistry()
    registry.register_provider(StubProvider("one"))
    assert run_provider_comparison(registry, tmp_path / "missing") == {}
