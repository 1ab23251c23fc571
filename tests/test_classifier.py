from __future__ import annotations

import pytest

from core.classifier import OperationClassifier
from core.config import ClassifierConfig
from core.models import Intent, QueryKind


@pytest.fixture()
def classifier() -> OperationClassifier:
    return OperationClassifier(ClassifierConfig())


@pytest.mark.parametrize(
    "text",
    [
        "update price of SKU-1",
        "Delete product ABC-123",
        "please MODIFY the listing",
        "add new jersey to the store",
        "remove the 2022 hobby boxes",
    ],
)
def test_write_requests(classifier: OperationClassifier, text: str) -> None:
    assert classifier.classify_intent(text) is Intent.WRITE


@pytest.mark.parametrize(
    "text",
    [
        "list sealed boxes from 2022",
        "count PSA 10 pikachu cards",
        "what is in stock?",
    ],
)
def test_read_requests(classifier: OperationClassifier, text: str) -> None:
    assert classifier.classify_intent(text) is Intent.READ


def test_question_marker_overrides_write_keyword(classifier: OperationClassifier) -> None:
    assert classifier.classify_intent("how do I update inventory") is Intent.READ
    assert classifier.classify_intent("Show me what to delete") is Intent.READ


def test_query_with_mutation_keyword(classifier: OperationClassifier) -> None:
    query = 'mutation { productUpdate(input: {id: "gid://shopify/Product/1", title: "x"}) { product { id } } }'
    assert classifier.classify_query(query) is QueryKind.MUTATION
    assert classifier.mutation_hits(query) == ["mutation", "update"]


def test_query_substring_false_positive_is_kept(classifier: OperationClassifier) -> None:
    query = 'query { products(query:"title:*update*") { edges { node { id } } } }'
    assert classifier.classify_query(query) is QueryKind.MUTATION


def test_plain_read_query(classifier: OperationClassifier) -> None:
    query = 'query { products(first: 10, query: "product_type:Sealed") { edges { node { id title } } } }'
    assert classifier.classify_query(query) is QueryKind.READ


def test_sensitive_keywords(classifier: OperationClassifier) -> None:
    assert classifier.contains_sensitive_keyword("Bulk Update all jerseys")
    assert classifier.contains_sensitive_keyword("change price of SKU-1 to 10")
    assert not classifier.contains_sensitive_keyword("count sealed cases")
    assert classifier.sensitive_hits("update price and remove it") == ["remove", "update price"]


def test_sensitive_check_is_independent_of_intent(classifier: OperationClassifier) -> None:
    text = "how would I delete a product"
    assert classifier.classify_intent(text) is Intent.READ
    assert classifier.contains_sensitive_keyword(text)


def test_custom_keyword_lists_are_case_insensitive() -> None:
    classifier = OperationClassifier(
        ClassifierConfig(
            write_keywords=("Restock",),
            read_markers=("Which",),
            mutation_keywords=("Mutation",),
            sensitive_keywords=("Archive",),
        )
    )
    assert classifier.classify_intent("restock the boxes") is Intent.WRITE
    assert classifier.classify_intent("which boxes need a restock") is Intent.READ
    assert classifier.classify_intent("update price") is Intent.READ
    assert classifier.classify_query("MUTATION { x }") is QueryKind.MUTATION
    assert classifier.contains_sensitive_keyword("archive everything")
