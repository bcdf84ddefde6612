from __future__ import annotations

from salonbot.application.use_cases.classify_intent import ClassifyIntentUseCase


def test_booking_keywords():
    classifier = ClassifyIntentUseCase()
    for text in ("I want to book", "Can I get an appointment?", "schedule me in please"):
        assert classifier.execute(text).is_booking, text


def test_service_synonyms():
    classifier = ClassifyIntentUseCase()
    result = classifier.execute("Need a hair cut tomorrow")
    assert result.is_booking
    assert result.service == "haircut"


def test_tenant_service_names():
    classifier = ClassifyIntentUseCase()
    result = classifier.execute("keratin treatment available?", ["Keratin Treatment", "Haircut"])
    assert result.is_booking
    assert result.service == "Keratin Treatment"


def test_general_messages():
    classifier = ClassifyIntentUseCase()
    result = classifier.execute("Hi, what are your opening hours?")
    assert not result.is_booking
    assert result.intent == "general"
    assert result.normalized_text == "hi what are your opening hours"


def test_classification_is_stable():
    classifier = ClassifyIntentUseCase()
    first = classifier.execute("Pedicure please", ["Pedicure"])
    second = classifier.execute("Pedicure please", ["Pedicure"])
    assert first == second
