"""Tests for the user, catalog, booking and moderation routes."""

from datetime import timedelta

from jurnext.models.booking import Booking, BookingStatus
from jurnext.models.ticket import Ticket, TicketStatus
from jurnext.models.user import User, UserRole
from jurnext.services.identity import IdentityVerifier, Principal, vendor_owns_ticket
from tests.factories import seed_user, seed_ticket, seed_booking, fetch

ADMIN = "admin@example.com"
VENDOR = "vendor@example.com"
CUSTOMER = "customer@example.com"


class TestIdentity:

    def test_missing_token_is_401(self, client):
        assert client.get("/booked-tickets").status_code == 401

    def test_garbage_token_is_401(self, client):
        response = client.get("/booked-tickets", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_expired_token_is_401(self, client, settings):
        token = IdentityVerifier(settings).issue(CUSTOMER, expires_delta=timedelta(seconds=-10))

        response = client.get("/booked-tickets", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_token_signed_with_another_secret_is_401(self, client, settings):
        other = settings.model_copy(update={"token_secret": "someone-else"})
        token = IdentityVerifier(other).issue(CUSTOMER)

        response = client.get("/booked-tickets", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_role_defaults_to_customer(self, client, auth_headers):
        response = client.get("/user/role", headers=auth_headers("new@example.com"))

        assert response.json() == {"role": "customer"}


class TestUsers:

    def test_upsert_creates_customer_then_keeps_role(self, client, database, auth_headers):
        response = client.post("/user", json={"email": "rafi@example.com", "name": "Rafi"})
        assert response.status_code == 200
        user_id = response.json()["id"]
        assert response.json()["role"] == "customer"

        seed_user(database, ADMIN, role=UserRole.ADMIN)
        client.patch("/update-role", json={"id": user_id, "role": "vendor"}, headers=auth_headers(ADMIN))

        again = client.post("/user", json={"email": "rafi@example.com", "name": "Rafi"})
        assert again.json()["id"] == user_id
        assert again.json()["role"] == "vendor"

    def test_upsert_rejects_invalid_email(self, client):
        assert client.post("/user", json={"email": "nope"}).status_code == 422

    def test_admin_lists_users(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)
        seed_user(database, CUSTOMER)

        response = client.get("/users", headers=auth_headers(ADMIN))

        assert response.status_code == 200
        assert {u["email"] for u in response.json()} == {ADMIN, CUSTOMER}

    def test_non_admin_cannot_list_users(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)

        assert client.get("/users", headers=auth_headers(VENDOR)).status_code == 403

    def test_update_role_requires_id(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)

        response = client.patch("/update-role", json={"role": "vendor"}, headers=auth_headers(ADMIN))

        assert response.status_code == 400
        assert response.json()["detail"] == "User ID is required"

    def test_update_role_unknown_user(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)

        response = client.patch("/update-role", json={"id": 999, "role": "vendor"}, headers=auth_headers(ADMIN))

        assert response.status_code == 404

    def test_mark_and_unmark_fraud(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)
        vendor_id = seed_user(database, VENDOR, role=UserRole.VENDOR)

        marked = client.patch(f"/users/mark-fraud/{vendor_id}", headers=auth_headers(ADMIN))
        assert marked.json()["fraud"] is True

        unmarked = client.patch(f"/users/unmark-fraud/{vendor_id}", headers=auth_headers(ADMIN))
        assert unmarked.json()["fraud"] is False
        assert fetch(database, User, vendor_id).fraud is False


class TestTickets:

    def ticket_body(self, **overrides):
        body = {
            "title": "Chittagong night coach",
            "from": "Dhaka",
            "to": "Chittagong",
            "transport": "bus",
            "departure": "2026-12-01T22:30:00",
            "perks": ["AC", "WiFi"],
            "image": "https://img.test/coach.png",
            "price": 850,
            "quantity": 40
        }
        body.update(overrides)
        return body

    def test_vendor_adds_pending_ticket(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR, name="Green Line")

        response = client.post("/tickets", json=self.ticket_body(), headers=auth_headers(VENDOR))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["advertise"] is False
        assert body["vendor"] == {"email": VENDOR, "name": "Green Line"}
        assert body["from"] == "Dhaka"
        assert body["perks"] == ["AC", "WiFi"]

    def test_customer_cannot_add_ticket(self, client, auth_headers):
        response = client.post("/tickets", json=self.ticket_body(), headers=auth_headers(CUSTOMER))

        assert response.status_code == 403

    def test_fraud_vendor_cannot_add_ticket(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR, fraud=True)

        response = client.post("/tickets", json=self.ticket_body(), headers=auth_headers(VENDOR))

        assert response.status_code == 403

    def test_negative_quantity_is_rejected(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)

        response = client.post("/tickets", json=self.ticket_body(quantity=-1), headers=auth_headers(VENDOR))

        assert response.status_code == 422

    def test_public_listing_shows_only_approved_from_honest_vendors(self, client, database):
        seed_user(database, "cheat@example.com", role=UserRole.VENDOR, fraud=True)
        approved = seed_ticket(database)
        seed_ticket(database, status=TicketStatus.PENDING)
        seed_ticket(database, status=TicketStatus.REJECTED)
        seed_ticket(database, vendor_email="cheat@example.com")

        response = client.get("/approved-tickets")

        assert [t["id"] for t in response.json()] == [approved]

    def test_get_single_ticket(self, client, database):
        ticket_id = seed_ticket(database, price=300)

        assert client.get(f"/tickets/{ticket_id}").json()["price"] == 300
        assert client.get("/tickets/999").status_code == 404

    def test_vendor_sees_own_tickets(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)
        mine = seed_ticket(database, status=TicketStatus.PENDING)
        seed_ticket(database, vendor_email="rival@example.com")

        response = client.get("/added-tickets", headers=auth_headers(VENDOR))

        assert [t["id"] for t in response.json()] == [mine]

    def test_admin_moderates_ticket_status(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)
        ticket_id = seed_ticket(database, status=TicketStatus.PENDING)

        response = client.patch(f"/tickets/{ticket_id}", json={"status": "approved"}, headers=auth_headers(ADMIN))
        assert response.status_code == 200
        assert response.json()["status"] == "approved"

        # nothing changes the second time
        again = client.patch(f"/tickets/{ticket_id}", json={"status": "approved"}, headers=auth_headers(ADMIN))
        assert again.status_code == 404

    def test_admin_sees_all_tickets(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)
        seed_ticket(database)
        seed_ticket(database, status=TicketStatus.PENDING)

        response = client.get("/tickets", headers=auth_headers(ADMIN))

        assert len(response.json()) == 2


class TestAdvertise:

    def test_seventh_advertisement_is_rejected(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)
        for _ in range(6):
            seed_ticket(database, advertise=True)
        candidate = seed_ticket(database)

        response = client.patch(
            f"/advertise-ticket/{candidate}", json={"advertise": True}, headers=auth_headers(ADMIN)
        )

        assert response.status_code == 400
        assert "more than 6" in response.json()["detail"]
        assert fetch(database, Ticket, candidate).advertise is False
        assert len(client.get("/advertised-tickets").json()) == 6

    def test_advertise_below_cap(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)
        for _ in range(5):
            seed_ticket(database, advertise=True)
        candidate = seed_ticket(database)

        response = client.patch(
            f"/advertise-ticket/{candidate}", json={"advertise": True}, headers=auth_headers(ADMIN)
        )

        assert response.status_code == 200
        assert response.json()["advertise"] is True

    def test_withdraw_is_allowed_at_cap(self, client, database, auth_headers):
        seed_user(database, ADMIN, role=UserRole.ADMIN)
        advertised = [seed_ticket(database, advertise=True) for _ in range(6)]

        response = client.patch(
            f"/advertise-ticket/{advertised[0]}", json={"advertise": False}, headers=auth_headers(ADMIN)
        )

        assert response.status_code == 200
        assert response.json()["advertise"] is False

    def test_only_admin_can_advertise(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)
        ticket_id = seed_ticket(database)

        response = client.patch(
            f"/advertise-ticket/{ticket_id}", json={"advertise": True}, headers=auth_headers(VENDOR)
        )

        assert response.status_code == 403


class TestBookings:

    def test_customer_books_approved_ticket(self, client, database, auth_headers):
        seed_user(database, CUSTOMER, name="Rafi")
        ticket_id = seed_ticket(database, quantity=5)

        response = client.post(
            "/book-ticket", json={"ticketID": ticket_id, "quantity": 2}, headers=auth_headers(CUSTOMER)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["customer"] == {"email": CUSTOMER, "name": "Rafi"}
        assert body["vendor"]["email"] == VENDOR
        assert body["ticketID"] == ticket_id

    def test_cannot_book_more_than_available(self, client, database, auth_headers):
        ticket_id = seed_ticket(database, quantity=1)

        response = client.post(
            "/book-ticket", json={"ticketID": ticket_id, "quantity": 2}, headers=auth_headers(CUSTOMER)
        )

        assert response.status_code == 400

    def test_cannot_book_unapproved_ticket(self, client, database, auth_headers):
        ticket_id = seed_ticket(database, status=TicketStatus.PENDING)

        response = client.post(
            "/book-ticket", json={"ticketID": ticket_id, "quantity": 1}, headers=auth_headers(CUSTOMER)
        )

        assert response.status_code == 400

    def test_booked_tickets_joins_ticket_details(self, client, database, auth_headers):
        ticket_id = seed_ticket(database, price=500)
        seed_booking(database, ticket_id, quantity=3)
        seed_booking(database, ticket_id, customer_email="other@example.com")

        response = client.get("/booked-tickets", headers=auth_headers(CUSTOMER))

        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["quantity"] == 3
        details = rows[0]["ticketDetails"]
        assert details["title"] == "Dhaka to Cox's Bazar"
        assert details["price"] == 500
        for hidden in ("perks", "transport", "quantity", "vendor", "id"):
            assert hidden not in details
        assert "customer" not in rows[0]
        assert "ticketID" not in rows[0]

    def test_vendor_sees_requests_with_ticket_title_and_price(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)
        ticket_id = seed_ticket(database, price=750, title="Sylhet express")
        booking_id = seed_booking(database, ticket_id)
        other_ticket = seed_ticket(database, vendor_email="rival@example.com")
        seed_booking(database, other_ticket, vendor_email="rival@example.com")

        response = client.get("/requested-booking", headers=auth_headers(VENDOR))

        assert response.json() == [{
            "id": booking_id,
            "customer": {"email": CUSTOMER, "name": "Rafi"},
            "vendor": {"email": VENDOR, "name": "Green Line"},
            "status": "pending",
            "quantity": 2,
            "ticketPrice": 750,
            "ticketTitle": "Sylhet express"
        }]

    def test_vendor_accepts_own_booking(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)
        booking_id = seed_booking(database, seed_ticket(database))

        response = client.patch(
            f"/booking-status/{booking_id}", json={"status": "accepted"}, headers=auth_headers(VENDOR)
        )

        assert response.status_code == 200
        assert response.json()["status"] == "accepted"

    def test_vendor_cannot_touch_another_vendors_booking(self, client, database, auth_headers):
        seed_user(database, "rival@example.com", role=UserRole.VENDOR)
        booking_id = seed_booking(database, seed_ticket(database))

        response = client.patch(
            f"/booking-status/{booking_id}", json={"status": "rejected"},
            headers=auth_headers("rival@example.com")
        )

        assert response.status_code == 403

    def test_vendor_cannot_mark_paid(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)
        booking_id = seed_booking(database, seed_ticket(database))

        response = client.patch(
            f"/booking-status/{booking_id}", json={"status": "Paid"}, headers=auth_headers(VENDOR)
        )

        assert response.status_code == 400
        assert fetch(database, Booking, booking_id).status == BookingStatus.PENDING.value

    def test_paid_booking_is_never_changed(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)
        booking_id = seed_booking(database, seed_ticket(database), status=BookingStatus.PAID.value)

        response = client.patch(
            f"/booking-status/{booking_id}", json={"status": "rejected"}, headers=auth_headers(VENDOR)
        )

        assert response.status_code == 404
        assert fetch(database, Booking, booking_id).status == "Paid"


def test_home(client):
    response = client.get("/")

    assert response.text == "Hello from Server.."
    assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestOwnershipPolicies:

    def test_vendor_owns_only_their_tickets(self):
        vendor = Principal(email=VENDOR, role=UserRole.VENDOR)
        mine = Ticket(vendor_email=VENDOR)
        theirs = Ticket(vendor_email="rival@example.com")

        assert vendor_owns_ticket(vendor, mine)
        assert not vendor_owns_ticket(vendor, theirs)

    def test_customer_with_matching_email_does_not_own_ticket(self):
        customer = Principal(email=VENDOR, role=UserRole.CUSTOMER)

        assert not vendor_owns_ticket(customer, Ticket(vendor_email=VENDOR))

    def test_booking_ownership_follows_the_ticket(self, client, database, auth_headers):
        seed_user(database, VENDOR, role=UserRole.VENDOR)
        rival_ticket = seed_ticket(database, vendor_email="rival@example.com")
        # snapshot names this vendor, but the ticket belongs to someone else
        booking_id = seed_booking(database, rival_ticket, vendor_email=VENDOR)

        response = client.patch(
            f"/booking-status/{booking_id}", json={"status": "accepted"}, headers=auth_headers(VENDOR)
        )

        assert response.status_code == 403
        assert fetch(database, Booking, booking_id).status == BookingStatus.PENDING.value
