from fastapi.testclient import TestClient

from src.service.storefront.domain.domain_errors import SeatUnavailableError
from test.service.storefront.fake_booking_service import (
    BOOKING_ID,
    EVENT_ID,
    SCHEDULE_ID,
    FakeBookingServiceGateway,
)


START_URL = f'/api/booking/{EVENT_ID}/{SCHEDULE_ID}'
CUSTOMER = {'name': 'Anna Joseph', 'phone': '9847012345', 'email': 'anna@example.com'}


def _start_with_seats(client: TestClient, seats: list[str]) -> dict:
    assert client.post(START_URL).status_code == 201
    response = client.put('/api/booking/seats', json={'seats': seats})
    assert response.status_code == 200
    return response.json()


def _to_details(client: TestClient) -> None:
    _start_with_seats(client, ['A1', 'D2'])
    assert client.post('/api/booking/review').status_code == 200
    assert client.post('/api/booking/terms', json={'accepted': True}).status_code == 200
    assert client.post('/api/booking/details', json=CUSTOMER).status_code == 200


class TestBookingFlowApi:
    def test_start_sets_session_cookie_and_shows_seats(self, client: TestClient) -> None:
        response = client.post(START_URL)

        assert response.status_code == 201
        assert 'storefront_session' in response.cookies
        body = response.json()
        assert body['step'] == 'selecting_seats'
        assert body['seat_statuses']['A5'] == 'booked'
        assert body['status_counts']['booked'] == 1

    def test_seat_selection_is_priced(
        self, client: TestClient, fake_gateway: FakeBookingServiceGateway
    ) -> None:
        body = _start_with_seats(client, ['A1', 'D2'])

        assert body['selected_seats'] == ['A1', 'D2']
        assert body['seat_statuses']['A1'] == 'locked_by_me'
        assert body['quote'] == {
            'subtotal': 800,
            'convenience_fee': 96,
            'fee_base': 81,
            'fee_gst': 15,
            'final_amount': 896,
        }
        assert body['lock_expires_at'] is not None
        assert fake_gateway.held == {'A1', 'D2'}

    def test_toggle_seat(self, client: TestClient) -> None:
        client.post(START_URL)

        response = client.post('/api/booking/seats/B2/toggle')

        assert response.json()['selected_seats'] == ['B2']

    def test_unpriced_seat_cannot_go_to_review(self, client: TestClient) -> None:
        body = _start_with_seats(client, ['G9'])

        assert body['quote'] is None
        assert 'G9' in body['pricing_error']
        assert body['notifications'][0]['kind'] == 'pricing_undefined'

        response = client.post('/api/booking/review')

        assert response.status_code == 422
        assert client.get('/api/booking').json()['step'] == 'selecting_seats'

    def test_details_require_accepted_terms(self, client: TestClient) -> None:
        _start_with_seats(client, ['A1'])
        client.post('/api/booking/review')

        response = client.post('/api/booking/details', json=CUSTOMER)

        assert response.status_code == 409

    def test_declined_terms_return_to_seats(self, client: TestClient) -> None:
        _start_with_seats(client, ['A1'])
        client.post('/api/booking/review')

        response = client.post('/api/booking/terms', json={'accepted': False})

        assert response.json()['step'] == 'selecting_seats'
        assert response.json()['selected_seats'] == ['A1']

    def test_invalid_details_report_each_field(self, client: TestClient) -> None:
        _start_with_seats(client, ['A1'])
        client.post('/api/booking/review')
        client.post('/api/booking/terms', json={'accepted': True})

        response = client.post(
            '/api/booking/details', json={'name': '', 'phone': '12', 'email': 'x'}
        )

        assert response.status_code == 422
        assert set(response.json()['field_errors']) == {'name', 'phone', 'email'}
        assert client.get('/api/booking').json()['step'] == 'entering_details'

    def test_submit_confirms_booking(
        self, client: TestClient, fake_gateway: FakeBookingServiceGateway
    ) -> None:
        _to_details(client)

        response = client.post('/api/booking/submit')

        assert response.status_code == 200
        body = response.json()
        assert body['accepted'] is True
        assert body['success'] is True
        assert body['booking_id'] == BOOKING_ID
        assert body['flow']['step'] == 'confirmed'
        assert fake_gateway.create_calls[0].total_amount == 896

    def test_submit_conflict_returns_to_seat_selection(
        self, client: TestClient, fake_gateway: FakeBookingServiceGateway
    ) -> None:
        _to_details(client)
        fake_gateway.booked.add('A1')
        fake_gateway.fail_with['create_booking'] = SeatUnavailableError(
            ['A1'], 'Seat A1 was just booked'
        )

        body = client.post('/api/booking/submit').json()

        assert body['accepted'] is True
        assert body['success'] is False
        assert body['unavailable_seats'] == ['A1']
        assert body['flow']['step'] == 'selecting_seats'
        assert body['flow']['selected_seats'] == ['D2']
        assert body['flow']['seat_statuses']['A1'] == 'booked'

    def test_notification_dismissal(self, client: TestClient) -> None:
        body = _start_with_seats(client, ['A5'])
        notification_id = body['notifications'][0]['id']

        response = client.delete(f'/api/booking/notification/{notification_id}')

        assert response.status_code == 200
        assert response.json()['notifications'] == []
        assert client.delete(f'/api/booking/notification/{notification_id}').status_code == 404

    def test_abandon_releases_locks(
        self, client: TestClient, fake_gateway: FakeBookingServiceGateway
    ) -> None:
        _start_with_seats(client, ['A1', 'D2'])

        response = client.delete('/api/booking')

        assert response.status_code == 204
        assert fake_gateway.held == set()
        assert client.get('/api/booking').status_code == 404

    def test_restarting_releases_the_previous_flow(
        self, client: TestClient, fake_gateway: FakeBookingServiceGateway
    ) -> None:
        _start_with_seats(client, ['A1'])

        client.post(START_URL)

        assert fake_gateway.release_calls == [['A1']]

    def test_booking_endpoints_need_a_session(self, client: TestClient) -> None:
        response = client.get('/api/booking')

        assert response.status_code == 401

    def test_malformed_body(self, client: TestClient) -> None:
        client.post(START_URL)

        response = client.put('/api/booking/seats', json={})

        assert response.status_code == 400
