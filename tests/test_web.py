"""HTTP tests for the HTML front end, run against an in-memory database."""

from datetime import date, timedelta

from venue_booking.domain.enums import BookingStatus, PaymentStatus, Role
from venue_booking.models import Booking, Payment, User, Venue


def upcoming(n: int) -> str:
    return (date.today() + timedelta(days=30 + n)).isoformat()


def book(client, venue_id: int, start: int, end: int, follow_redirects: bool = False):
    return client.post(
        "/bookings/create",
        data={"venue_id": venue_id, "start_date": upcoming(start), "end_date": upcoming(end)},
        follow_redirects=follow_redirects,
    )


class TestAuthPages:
    def test_protected_page_redirects_to_login(self, client):
        response = client.get("/bookings", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_wrong_password_is_unauthorized(self, client, customer):
        response = client.post("/login", data={"username": "carol", "password": "bad"})

        assert response.status_code == 401
        assert "Invalid credentials" in response.text

    def test_overlong_password_is_unauthorized(self, client, customer):
        response = client.post("/login", data={"username": "carol", "password": "x" * 80})

        assert response.status_code == 401

    def test_register_rejects_password_over_72_bytes(self, client, db):
        response = client.post(
            "/register",
            data={"username": "eve", "email": "eve@example.com", "password": "\u00e9" * 40},
        )

        assert response.status_code == 400
        assert "72 bytes" in response.text
        db.expire_all()
        assert db.query(User).filter(User.username == "eve").count() == 0

    def test_login_shows_dashboard(self, client, customer, login):
        login("carol")

        response = client.get("/dashboard")

        assert response.status_code == 200
        assert "Welcome, carol" in response.text

    def test_logout_clears_session(self, client, customer, login):
        login("carol")
        client.get("/logout")

        assert client.get("/dashboard", follow_redirects=False).status_code == 303

    def test_register_as_admin_is_rejected(self, client):
        response = client.post(
            "/register",
            data={"username": "eve", "email": "eve@example.com", "password": "secret", "role": "ADMIN"},
        )

        assert response.status_code == 400
        assert "cannot register as admin" in response.text

    def test_duplicate_username_conflicts(self, client, customer):
        response = client.post(
            "/register",
            data={"username": "carol", "email": "new@example.com", "password": "secret"},
        )

        assert response.status_code == 409

    def test_manager_needs_approval_before_login(self, client, db, admin, login):
        response = client.post(
            "/register",
            data={
                "username": "manny",
                "email": "manny@example.com",
                "password": "secret",
                "role": "EVENT_MANAGER",
            },
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert client.post("/login", data={"username": "manny", "password": "secret"}).status_code == 401

        db.expire_all()
        manager = db.query(User).filter(User.username == "manny").one()
        login("root")
        approvals = client.get("/admin/approvals")
        assert "manny" in approvals.text
        client.post(f"/admin/approve/{manager.id}", follow_redirects=False)
        client.get("/logout")

        login("manny")
        assert client.get("/dashboard").status_code == 200


class TestBookingPages:
    def test_overlapping_booking_returns_conflict(self, client, db, venue, customer, login):
        login("carol")

        first = book(client, venue.id, 0, 2)
        second = book(client, venue.id, 1, 3)

        assert first.status_code == 303
        assert second.status_code == 409
        assert "already booked" in second.text
        db.expire_all()
        assert db.query(Booking).count() == 1

    def test_pay_confirms_booking(self, client, db, venue, customer, login):
        login("carol")
        book(client, venue.id, 0, 2)
        db.expire_all()
        booking = db.query(Booking).one()

        page = client.get(f"/payments/pay/{booking.id}")
        assert "3,000.00" in page.text

        response = client.post("/payments/process", data={"booking_id": booking.id}, follow_redirects=False)

        assert response.status_code == 303
        db.expire_all()
        assert db.get(Booking, booking.id).status == BookingStatus.CONFIRMED
        assert db.query(Payment).one().status == PaymentStatus.SUCCESS

    def test_cancel_refunds_payment(self, client, db, venue, customer, login):
        login("carol")
        book(client, venue.id, 0, 0)
        db.expire_all()
        booking = db.query(Booking).one()
        client.post("/payments/process", data={"booking_id": booking.id})

        client.post(f"/bookings/cancel/{booking.id}")

        db.expire_all()
        assert db.get(Booking, booking.id).status == BookingStatus.CANCELLED
        assert db.query(Payment).one().status == PaymentStatus.REFUNDED

    def test_cannot_cancel_someone_elses_booking(self, client, db, venue, customer, make_user, login):
        make_user("mallory")
        login("carol")
        book(client, venue.id, 0, 0)
        db.expire_all()
        booking = db.query(Booking).one()
        client.get("/logout")

        login("mallory")
        response = client.post(f"/bookings/cancel/{booking.id}")

        assert response.status_code == 403
        db.expire_all()
        assert db.get(Booking, booking.id).status == BookingStatus.PENDING

    def test_unknown_venue_is_not_found(self, client, customer, login):
        login("carol")

        assert client.get("/bookings/create/999").status_code == 404

    def test_bad_status_filter_is_rejected(self, client, customer, login):
        login("carol")

        assert client.get("/bookings", params={"status": "ARCHIVED"}).status_code == 400


class TestVenuePages:
    def test_customer_cannot_add_venue(self, client, customer, login):
        login("carol")

        assert client.get("/venues/add").status_code == 403

    def test_manager_creates_venue(self, client, db, make_user, login):
        make_user("manny", Role.EVENT_MANAGER)
        login("manny")

        response = client.post(
            "/venues/add",
            data={"name": "Roof Terrace", "location": "Harbour 9", "capacity": 80, "price_per_day": 450},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"].startswith("/venues/edit/")
        assert "Roof Terrace" in client.get("/venues").text

    def test_non_image_upload_is_rejected(self, client, db, manager, login):
        login("manny")

        response = client.post(
            "/venues/add",
            data={"name": "Loft", "location": "Dock 3", "price_per_day": 100},
            files={"image_file": ("page.html", b"<script>alert(1)</script>", "text/html")},
        )

        assert response.status_code == 400
        db.expire_all()
        assert db.query(Venue).count() == 0

    def test_only_admin_deletes_venue(self, client, venue, manager, admin, login):
        login("manny")
        assert client.post(f"/venues/delete/{venue.id}").status_code == 403
        client.get("/logout")

        login("root")
        client.post(f"/venues/delete/{venue.id}")

        assert client.get(f"/venues/edit/{venue.id}").status_code == 404


class TestSupportPages:
    def test_customer_files_and_manager_resolves(self, client, customer, manager, login):
        login("carol")
        client.post("/support/create", data={"issue_type": "Payment", "description": "Charged twice"})
        assert "Charged twice" in client.get("/support").text
        client.get("/logout")

        login("manny")
        missing_notes = client.post("/support/resolve/1", data={"resolution_notes": ""})
        assert missing_notes.status_code == 400

        client.post("/support/resolve/1", data={"resolution_notes": "Refund issued"})
        assert "Refund issued" in client.get("/support").text
