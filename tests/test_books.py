"""
Tests for Books API Endpoints

Covers /api/v1/books: listing, retrieval, creation and moderator deletion.
Books expose their rating aggregate; clients can never set it.

TEST NAMING CONVENTION:
- test_<action>_<scenario>
- Examples: test_create_book_success, test_get_book_not_found
"""

from fastapi import status

from bookreviews.models import User
from bookreviews.services.security import create_access_token


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


class TestListBooks:
    """Tests for GET /api/v1/books/ endpoint."""

    def test_list_books_empty(self, client):
        response = client.get("/api/v1/books/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["page"] == 1
        assert data["pages"] == 0

    def test_list_books_with_data(self, client, sample_book):
        response = client.get("/api/v1/books/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        item = data["items"][0]
        assert item["title"] == "1984"
        assert item["author"] == "George Orwell"
        assert item["average_rating"] == 0
        assert item["review_count"] == 0

    def test_list_books_pagination(self, client, multiple_books):
        response = client.get("/api/v1/books/?page=1&per_page=5")
        data = response.json()
        assert len(data["items"]) == 5
        assert data["total"] == 15
        assert data["pages"] == 3

        response = client.get("/api/v1/books/?page=3&per_page=5")
        data = response.json()
        assert len(data["items"]) == 5
        assert data["page"] == 3

    def test_list_books_invalid_pagination(self, client):
        """Page must be >= 1 and per_page at most 100."""
        assert client.get("/api/v1/books/?page=0").status_code == 422
        assert client.get("/api/v1/books/?per_page=101").status_code == 422

    def test_list_books_shows_current_rating(self, client, sample_review):
        response = client.get("/api/v1/books/")

        item = response.json()["items"][0]
        assert item["average_rating"] == 4.0
        assert item["review_count"] == 1


class TestGetBook:
    """Tests for GET /api/v1/books/{id} endpoint."""

    def test_get_book_success(self, client, sample_book):
        response = client.get(f"/api/v1/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_book.id
        assert data["description"] == "A dystopian novel set in a totalitarian society."

    def test_get_book_not_found(self, client):
        response = client.get("/api/v1/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "not found" in response.json()["detail"].lower()


class TestCreateBook:
    """Tests for POST /api/v1/books/ endpoint."""

    def test_create_book_success(self, client, sample_user):
        book_data = {
            "title": "Brave New World",
            "author": "Aldous Huxley",
            "description": "A futuristic World State of engineered citizens.",
        }

        response = client.post(
            "/api/v1/books/",
            json=book_data,
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "Brave New World"
        assert data["average_rating"] == 0
        assert data["review_count"] == 0
        assert "id" in data

    def test_create_book_ignores_aggregate_fields(self, client, sample_user):
        response = client.post(
            "/api/v1/books/",
            json={
                "title": "Dune",
                "author": "Frank Herbert",
                "average_rating": 5,
                "review_count": 1000,
            },
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["average_rating"] == 0
        assert response.json()["review_count"] == 0

    def test_create_book_requires_auth(self, client):
        response = client.post(
            "/api/v1/books/",
            json={"title": "Dune", "author": "Frank Herbert"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_book_blank_title(self, client, sample_user):
        response = client.post(
            "/api/v1/books/",
            json={"title": "   ", "author": "Frank Herbert"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == 422

    def test_create_book_missing_author(self, client, sample_user):
        response = client.post(
            "/api/v1/books/",
            json={"title": "Dune"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == 422


class TestDeleteBook:
    """Tests for DELETE /api/v1/books/{id} endpoint."""

    def test_delete_book_as_superuser(self, client, sample_book, superuser):
        response = client.delete(
            f"/api/v1/books/{sample_book.id}",
            headers=get_auth_header(superuser),
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"/api/v1/books/{sample_book.id}").status_code == 404

    def test_delete_book_removes_reviews(self, client, sample_review, superuser):
        book_id = sample_review.book_id
        review_id = sample_review.id

        client.delete(f"/api/v1/books/{book_id}", headers=get_auth_header(superuser))

        assert client.get(f"/api/v1/reviews/{review_id}").status_code == 404

    def test_delete_book_regular_user_forbidden(self, client, sample_book, sample_user):
        response = client.delete(
            f"/api/v1/books/{sample_book.id}",
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_book_not_found(self, client, superuser):
        response = client.delete("/api/v1/books/99999", headers=get_auth_header(superuser))

        assert response.status_code == status.HTTP_404_NOT_FOUND
