from prometheus_client import Counter, Gauge


class StorefrontMetrics:
    """
    Storefront client-side metrics

    Tracks how often seat locks lose races, how booking submissions end,
    and what the gate decides.
    """

    def __init__(self) -> None:
        self.seat_lock_requests = Counter(
            'storefront_seat_lock_requests_total',
            'Seats requested for locking',
            ['result'],  # result: locked/failed
        )

        self.seat_lock_releases = Counter(
            'storefront_seat_lock_releases_total',
            'Seat lock release calls',
            ['result'],  # result: ok/failed
        )

        self.booking_submissions = Counter(
            'storefront_booking_submissions_total',
            'Booking submissions by outcome',
            ['outcome'],  # outcome: confirmed/seat_conflict/failed
        )

        self.entry_verifications = Counter(
            'storefront_entry_verifications_total',
            'Gate scans by outcome',
            ['outcome'],  # outcome: granted/denied/dropped/network_error
        )

        self.active_booking_flows = Gauge(
            'storefront_active_booking_flows', 'Booking flows currently holding a schedule'
        )

    def record_lock_result(self, *, locked: int, failed: int) -> None:
        if locked:
            self.seat_lock_requests.labels(result='locked').inc(locked)
        if failed:
            self.seat_lock_requests.labels(result='failed').inc(failed)

    def record_release(self, *, ok: bool) -> None:
        self.seat_lock_releases.labels(result='ok' if ok else 'failed').inc()

    def record_submission(self, *, outcome: str) -> None:
        self.booking_submissions.labels(outcome=outcome).inc()

    def record_verification(self, *, outcome: str) -> None:
        self.entry_verifications.labels(outcome=outcome).inc()


# Global metrics instance
metrics = StorefrontMetrics()
