from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import httpx

from .config_types import ClientConfig
from .errors import NetworkError
from .models import FileContent, FormPayload
from .query import Query
from .transport import Transport


class ReviewHubClient:
    def __init__(self, cfg: ClientConfig | None = None, *, transport: httpx.BaseTransport | None = None):
        self._t = Transport(cfg or ClientConfig(), transport=transport)

    def close(self) -> None:
        self._t.close()

    def _get(self, path: str, query: Query | None = None) -> Any:
        return self._t.request("GET", query.apply(path) if query is not None else path)

    # --- Auth & profile ---
    def register(self, user_data: dict[str, Any]) -> Any:
        return self._t.request("POST", "/auth/register", json_body=user_data)

    def login(self, *, email: str, password: str) -> Any:
        return self._t.request("POST", "/auth/login", json_body={"email": email, "password": password})

    def logout(self) -> Any:
        return self._t.request("POST", "/auth/logout")

    def verify_email(self, token: str) -> Any:
        return self._t.request("POST", "/auth/verify-email", json_body={"token": token})

    def resend_verification_email(self, email: str) -> Any:
        return self._t.request("POST", "/auth/resend-verification", json_body={"email": email})

    def forgot_password(self, email: str) -> Any:
        return self._t.request("POST", "/auth/forgot-password", json_body={"email": email})

    def reset_password(self, token: str, password: str) -> Any:
        return self._t.request("POST", "/auth/reset-password", json_body={"token": token, "password": password})

    def get_profile(self) -> Any:
        return self._get("/auth/profile")

    def update_profile(self, profile_data: dict[str, Any]) -> Any:
        return self._t.request("PUT", "/auth/profile", json_body=profile_data)

    def change_password(self, password_data: dict[str, Any]) -> Any:
        return self._t.request("POST", "/change-password", json_body=password_data)

    # --- Products & categories ---
    def get_products(self, **params: Any) -> Any:
        return self._get("/products", Query.from_params(params))

    def get_product(self, product_id: int) -> Any:
        return self._get(f"/products/{product_id}")

    def get_categories(self) -> Any:
        return self._get("/categories")

    # --- Reviews ---
    def get_reviews(self, **params: Any) -> Any:
        return self._get("/reviews", Query.from_params(params))

    def get_review(self, review_id: int) -> Any:
        return self._get(f"/reviews/{review_id}")

    def create_review(self, review_data: dict[str, Any]) -> Any:
        return self._t.request("POST", "/reviews", json_body=review_data)

    def update_review(self, review_id: int, review_data: dict[str, Any]) -> Any:
        return self._t.request("PUT", f"/reviews/{review_id}", json_body=review_data)

    def delete_review(self, review_id: int) -> Any:
        return self._t.request("DELETE", f"/reviews/{review_id}")

    def vote_review(self, review_id: int, is_helpful: bool) -> Any:
        return self._t.request("POST", f"/reviews/{review_id}/vote", json_body={"is_helpful": bool(is_helpful)})

    def remove_vote(self, review_id: int) -> Any:
        return self._t.request("DELETE", f"/reviews/{review_id}/vote")

    def get_user_reviews(self, user_id: int, **params: Any) -> Any:
        return self._get(f"/users/{user_id}/reviews", Query.from_params(params))

    # --- Recommendations & analytics ---
    def get_user_recommendations(self, limit: int = 10) -> Any:
        return self._get("/recommendations/user", Query().always("limit", limit))

    def get_similar_products(self, product_id: int, limit: int = 5) -> Any:
        return self._get(f"/recommendations/similar/{product_id}", Query().always("limit", limit))

    def get_trending_products(self, category_id: int | None = None, limit: int = 10) -> Any:
        query = Query().optional("category_id", category_id).always("limit", limit)
        return self._get("/recommendations/trending", query)

    def get_user_analytics(self) -> Any:
        return self._get("/analytics/user")

    def track_interaction(self, product_id: int, interaction_type: str, rating: int | None = None) -> Any:
        body = {"product_id": product_id, "interaction_type": interaction_type, "rating": rating}
        return self._t.request("POST", "/interactions/track", json_body=body)

    # --- Admin ---
    def get_admin_dashboard(self) -> Any:
        return self._get("/admin/dashboard")

    def get_admin_users(
            self,
            page: int = 1,
            per_page: int = 20,
            search: str = "",
            sort_by: str = "created_at",
            order: str = "desc",
    ) -> Any:
        query = _page_query(page, per_page, sort_by, order).optional("search", search)
        return self._get("/admin/users", query)

    def update_user_status(self, user_id: int, is_active: bool) -> Any:
        return self._t.request("PUT", f"/admin/users/{user_id}/status", json_body={"is_active": bool(is_active)})

    def get_admin_products(
            self,
            page: int = 1,
            per_page: int = 20,
            search: str = "",
            category_id: int | None = None,
            sort_by: str = "created_at",
            order: str = "desc",
    ) -> Any:
        query = (
            _page_query(page, per_page, sort_by, order)
            .optional("search", search)
            .optional("category_id", category_id)
        )
        return self._get("/admin/products", query)

    def create_admin_product(self, product_data: dict[str, Any]) -> Any:
        return self._t.request("POST", "/admin/products", json_body=product_data)

    def update_admin_product(self, product_id: int, product_data: dict[str, Any]) -> Any:
        return self._t.request("PUT", f"/admin/products/{product_id}", json_body=product_data)

    def update_product_status(self, product_id: int, is_active: bool) -> Any:
        return self._t.request(
            "PUT", f"/admin/products/{product_id}/status", json_body={"is_active": bool(is_active)}
        )

    def get_admin_reviews(
            self,
            page: int = 1,
            per_page: int = 20,
            search: str = "",
            product_id: int | None = None,
            user_id: int | None = None,
            rating: int | None = None,
            sort_by: str = "created_at",
            order: str = "desc",
    ) -> Any:
        query = (
            _page_query(page, per_page, sort_by, order)
            .optional("search", search)
            .optional("product_id", product_id)
            .optional("user_id", user_id)
            .optional("rating", rating)
        )
        return self._get("/admin/reviews", query)

    def update_review_status(self, review_id: int, is_active: bool) -> Any:
        return self._t.request(
            "PUT", f"/admin/reviews/{review_id}/status", json_body={"is_active": bool(is_active)}
        )

    def create_admin_category(self, category_data: dict[str, Any]) -> Any:
        return self._t.request("POST", "/admin/categories", json_body=category_data)

    def get_admin_analytics(self, days: int = 30) -> Any:
        return self._get("/admin/analytics", Query().always("days", days))

    def bulk_update_products(self, product_ids: list[int], updates: dict[str, Any]) -> Any:
        body = {"product_ids": product_ids, "updates": updates}
        return self._t.request("PUT", "/admin/products/bulk-update", json_body=body)

    def bulk_update_reviews(self, review_ids: list[int], updates: dict[str, Any]) -> Any:
        body = {"review_ids": review_ids, "updates": updates}
        return self._t.request("PUT", "/admin/reviews/bulk-update", json_body=body)

    # --- Performance & cache ---
    def get_performance_metrics(self) -> Any:
        return self._get("/performance/metrics")

    def get_cache_stats(self) -> Any:
        return self._get("/performance/cache/stats")

    def clear_cache(self, pattern: str = "*") -> Any:
        return self._t.request("POST", "/performance/cache/clear", json_body={"pattern": pattern})

    def warm_cache(self) -> Any:
        return self._t.request("POST", "/performance/cache/warm")

    def optimize_database(self) -> Any:
        return self._t.request("POST", "/performance/database/optimize")

    # --- Images ---
    def upload_review_image(
            self,
            file: FileContent,
            review_id: int | None = None,
            alt_text: str = "",
            caption: str = "",
    ) -> Any:
        fields = _form_fields(review_id=review_id, alt_text=alt_text, caption=caption)
        form = FormPayload(fields=fields, files=[("image", file)])
        return self._t.request("POST", "/images/upload/review", form=form)

    def upload_multiple_review_images(self, files: list[FileContent], review_id: int | None = None) -> Any:
        form = FormPayload(fields=_form_fields(review_id=review_id), files=[("images", f) for f in files])
        return self._t.request("POST", "/images/upload/multiple", form=form)

    def upload_profile_image(self, file: FileContent) -> Any:
        return self._t.request("POST", "/images/upload/profile", form=FormPayload(files=[("image", file)]))

    def get_image(self, image_id: int) -> Any:
        return self._get(f"/images/{image_id}")

    def update_image(self, image_id: int, image_data: dict[str, Any]) -> Any:
        return self._t.request("PUT", f"/images/{image_id}", json_body=image_data)

    def delete_image(self, image_id: int) -> Any:
        return self._t.request("DELETE", f"/images/{image_id}")

    def get_user_images(self, user_id: int, **params: Any) -> Any:
        return self._get(f"/images/user/{user_id}", Query.from_params(params))

    def get_review_images(self, review_id: int) -> Any:
        return self._get(f"/images/review/{review_id}")

    # --- GDPR ---
    def record_consent(self, consent_type: str, granted: bool) -> Any:
        body = {"consent_type": consent_type, "granted": bool(granted)}
        return self._t.request("POST", "/gdpr/consent", json_body=body)

    def get_user_consents(self) -> Any:
        return self._get("/gdpr/consent")

    def withdraw_consent(self, consent_type: str) -> Any:
        return self._t.request("POST", "/gdpr/consent/withdraw", json_body={"consent_type": consent_type})

    def request_data_deletion(self, reason: str | None = None) -> Any:
        return self._t.request("POST", "/gdpr/deletion-request", json_body={"reason": reason})

    def get_deletion_requests(self) -> Any:
        return self._get("/gdpr/deletion-requests")

    def get_privacy_report(self) -> Any:
        return self._get("/gdpr/privacy-report")

    def get_data_retention_info(self) -> Any:
        return self._get("/gdpr/data-retention")

    def admin_get_deletion_requests(self, status: str = "pending") -> Any:
        return self._get("/admin/gdpr/deletion-requests", Query().always("status", status))

    def admin_process_deletion_request(self, request_id: int) -> Any:
        return self._t.request("POST", f"/admin/gdpr/deletion-request/{request_id}/process")

    # --- Data export ---
    def request_data_export(self, export_format: str = "json") -> Any:
        return self._t.request("POST", "/data-export/request", json_body={"export_format": export_format})

    def get_export_requests(self) -> Any:
        return self._get("/data-export/requests")

    def download_export(self, request_id: int) -> httpx.Response:
        """Open the export download; the caller iterates and closes the response."""
        return self._t.request("GET", f"/data-export/download/{request_id}", stream=True)

    def save_export(self, request_id: int, dest: str | os.PathLike) -> int:
        """Write the export to ``dest``; a download cut short leaves no file behind."""
        written = 0
        response = self.download_export(request_id)
        chunks = self._t.iter_stream(f"/data-export/download/{request_id}", response)
        try:
            with open(dest, "wb") as f:
                for chunk in chunks:
                    f.write(chunk)
                    written += len(chunk)
        except NetworkError:
            Path(dest).unlink(missing_ok=True)
            raise
        finally:
            chunks.close()
            response.close()
        return written

    def admin_cleanup_exports(self) -> Any:
        return self._t.request("POST", "/admin/data-export/cleanup")

    def admin_get_export_stats(self) -> Any:
        return self._get("/admin/data-export/stats")

    # --- Privacy settings ---
    def get_privacy_settings(self) -> Any:
        return self._get("/privacy/settings")

    def update_privacy_settings(self, settings: dict[str, Any]) -> Any:
        return self._t.request("PUT", "/privacy/settings", json_body=settings)

    def reset_privacy_settings(self) -> Any:
        return self._t.request("POST", "/privacy/settings/reset")

    def check_content_visibility(self, content_type: str, target_user_id: int) -> Any:
        body = {"content_type": content_type, "target_user_id": target_user_id}
        return self._t.request("POST", "/privacy/visibility-check", json_body=body)

    def get_communication_preferences(self) -> Any:
        return self._get("/privacy/communication-preferences")

    def update_communication_preferences(self, preferences: dict[str, Any]) -> Any:
        return self._t.request("PUT", "/privacy/communication-preferences", json_body=preferences)

    def get_data_sharing_preferences(self) -> Any:
        return self._get("/privacy/data-sharing")

    def update_data_sharing_preferences(self, preferences: dict[str, Any]) -> Any:
        return self._t.request("PUT", "/privacy/data-sharing", json_body=preferences)

    # --- Visual search ---
    def upload_image_for_visual_search(self, image: FileContent) -> Any:
        return self._t.request("POST", "/visual-search/upload", form=FormPayload(files=[("image", image)]))

    def search_visually_similar(self, search_id: str) -> Any:
        return self._t.request("POST", "/visual-search/search", json_body={"search_id": search_id})

    def get_visually_similar_products(self, product_id: int) -> Any:
        return self._get(f"/visual-search/similar/{product_id}")

    def get_visual_search_stats(self) -> Any:
        return self._get("/visual-search/stats")

    def admin_reindex_visual_search(self) -> Any:
        return self._t.request("POST", "/admin/visual-search/reindex")

    def admin_cleanup_visual_search(self, days: int = 7) -> Any:
        return self._t.request("POST", "/admin/visual-search/cleanup", json_body={"days": int(days)})

    # --- Voice search ---
    def process_voice_query(self, text: str) -> Any:
        return self._t.request("POST", "/voice-search/process", json_body={"text": text})

    def voice_search(self, text: str) -> Any:
        return self._t.request("POST", "/voice-search/search", json_body={"text": text})

    def get_voice_search_suggestions(self, partial_text: str, limit: int = 5) -> Any:
        query = Query().always("q", partial_text).always("limit", limit)
        return self._get("/voice-search/suggestions", query)

    def get_voice_search_analytics(self, days: int = 30) -> Any:
        return self._get("/voice-search/analytics", Query().always("days", days))

    def health_check(self) -> Any:
        # expected /health response: {"status": "healthy", ...}
        return self._get("/health")


def _page_query(page: int, per_page: int, sort_by: str, order: str) -> Query:
    return Query().always("page", page).always("per_page", per_page).always("sort_by", sort_by).always("order", order)


def _form_fields(**values: Any) -> dict[str, str]:
    fields: dict[str, str] = {}
    for key, value in values.items():
        if not value:
            continue
        fields[key] = str(value)
    return fields
