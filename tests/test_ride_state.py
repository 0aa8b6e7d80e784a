"""Unit tests for ride entity state transitions (State Pattern) and listeners."""

import pytest

from src.domain.entities import Location, Ride, RideFactory, RideRequest
from src.domain.enums import RideStatus, VehicleType
from src.domain.errors import InvalidConfiguration, InvalidStateTransition
from tests.conftest import RecordingListener, make_driver, make_rider


def _ride(status: RideStatus = RideStatus.REQUESTED, with_driver: bool = False) -> Ride:
    ride = Ride(
        id=1,
        rider=make_rider(),
        pickup=Location(0.0, 0.0),
        drop=Location(3.0, 4.0),
        vehicle_type=VehicleType.SEDAN,
        status=status,
    )
    if with_driver:
        ride.driver = make_driver()
    return ride


class TestRideStateMachine:
    def test_initial_status_is_requested(self):
        ride = _ride()
        assert ride.status == RideStatus.REQUESTED
        assert ride.driver is None
        assert ride.fare == 0.0
        assert ride.paid is False

    def test_distance_fixed_at_creation(self):
        ride = _ride()
        assert ride.distance_km == pytest.approx(5.0)

    # ── Valid transitions ─────────────────────────────────────────

    def test_assign_driver_moves_to_driver_assigned(self):
        ride = _ride()
        driver = make_driver()
        ride.assign_driver(driver)
        assert ride.status == RideStatus.DRIVER_ASSIGNED
        assert ride.driver is driver

    def test_full_lifecycle(self):
        ride = _ride()
        ride.assign_driver(make_driver())
        ride.update_status(RideStatus.EN_ROUTE_TO_PICKUP)
        ride.update_status(RideStatus.IN_PROGRESS)
        ride.update_status(RideStatus.COMPLETED)
        assert ride.status == RideStatus.COMPLETED
        assert ride.is_terminal

    def test_requested_to_cancelled(self):
        ride = _ride()
        ride.update_status(RideStatus.CANCELLED)
        assert ride.status == RideStatus.CANCELLED

    def test_in_progress_to_cancelled(self):
        ride = _ride(RideStatus.IN_PROGRESS, with_driver=True)
        ride.update_status(RideStatus.CANCELLED)
        assert ride.status == RideStatus.CANCELLED

    def test_assigned_can_skip_to_completed(self):
        ride = _ride(RideStatus.DRIVER_ASSIGNED, with_driver=True)
        ride.update_status(RideStatus.COMPLETED)
        assert ride.status == RideStatus.COMPLETED

    def test_accepts_status_string(self):
        ride = _ride(RideStatus.DRIVER_ASSIGNED, with_driver=True)
        ride.update_status("EN_ROUTE_TO_PICKUP")
        assert ride.status == RideStatus.EN_ROUTE_TO_PICKUP

    # ── Invalid transitions ───────────────────────────────────────

    def test_assign_driver_twice_fails(self):
        ride = _ride()
        ride.assign_driver(make_driver())
        with pytest.raises(InvalidStateTransition):
            ride.assign_driver(make_driver("Bob"))

    def test_driver_assigned_only_through_assign_driver(self):
        ride = _ride()
        with pytest.raises(InvalidStateTransition):
            ride.update_status(RideStatus.DRIVER_ASSIGNED)
        assert ride.driver is None

    def test_requested_to_in_progress_fails(self):
        """A ride never runs without a driver."""
        ride = _ride()
        with pytest.raises(InvalidStateTransition):
            ride.update_status(RideStatus.IN_PROGRESS)

    def test_backward_transition_fails(self):
        ride = _ride(RideStatus.IN_PROGRESS, with_driver=True)
        with pytest.raises(InvalidStateTransition):
            ride.update_status(RideStatus.EN_ROUTE_TO_PICKUP)

    @pytest.mark.parametrize("terminal", [RideStatus.COMPLETED, RideStatus.CANCELLED])
    @pytest.mark.parametrize(
        "target",
        [
            RideStatus.REQUESTED,
            RideStatus.EN_ROUTE_TO_PICKUP,
            RideStatus.IN_PROGRESS,
            RideStatus.COMPLETED,
            RideStatus.CANCELLED,
        ],
    )
    def test_terminal_states_reject_everything(self, terminal, target):
        ride = _ride(terminal, with_driver=True)
        with pytest.raises(InvalidStateTransition):
            ride.update_status(target)
        assert ride.status == terminal

    def test_assign_driver_after_cancel_fails(self):
        ride = _ride(RideStatus.CANCELLED)
        with pytest.raises(InvalidStateTransition):
            ride.assign_driver(make_driver())

    def test_terminal_error_names_current_status(self):
        ride = _ride(RideStatus.COMPLETED, with_driver=True)
        with pytest.raises(InvalidStateTransition, match="already COMPLETED"):
            ride.update_status(RideStatus.CANCELLED)

    # ── Payment flag ──────────────────────────────────────────────

    def test_mark_paid_on_completed_ride(self):
        ride = _ride(RideStatus.COMPLETED, with_driver=True)
        ride.mark_paid()
        assert ride.paid is True

    @pytest.mark.parametrize(
        "status",
        [RideStatus.REQUESTED, RideStatus.IN_PROGRESS, RideStatus.CANCELLED],
    )
    def test_mark_paid_requires_completed(self, status):
        ride = _ride(status, with_driver=True)
        with pytest.raises(InvalidStateTransition):
            ride.mark_paid()
        assert ride.paid is False


class TestRideListeners:
    def test_listeners_notified_in_attachment_order(self):
        log: list = []
        ride = _ride()
        ride.attach(RecordingListener("rider", log))
        ride.attach(RecordingListener("driver", log))

        ride.assign_driver(make_driver())
        ride.update_status(RideStatus.EN_ROUTE_TO_PICKUP)

        assert log == [
            ("rider", 1, RideStatus.DRIVER_ASSIGNED),
            ("driver", 1, RideStatus.DRIVER_ASSIGNED),
            ("rider", 1, RideStatus.EN_ROUTE_TO_PICKUP),
            ("driver", 1, RideStatus.EN_ROUTE_TO_PICKUP),
        ]

    def test_detached_listener_is_silent(self):
        ride = _ride()
        listener = RecordingListener()
        ride.attach(listener)
        ride.detach(listener)
        ride.update_status(RideStatus.CANCELLED)
        assert listener.log == []
        assert ride.listeners == ()

    def test_rejected_transition_notifies_nobody(self):
        ride = _ride(RideStatus.COMPLETED, with_driver=True)
        listener = RecordingListener()
        ride.attach(listener)
        with pytest.raises(InvalidStateTransition):
            ride.update_status(RideStatus.CANCELLED)
        assert listener.log == []

    def test_failing_listener_does_not_block_others(self, caplog):
        class Exploding:
            def handle(self, ride, new_status):
                raise RuntimeError("sms gateway down")

        ride = _ride()
        after = RecordingListener("after")
        ride.attach(Exploding())
        ride.attach(after)

        ride.assign_driver(make_driver())

        assert ride.status == RideStatus.DRIVER_ASSIGNED
        assert after.log == [("after", 1, RideStatus.DRIVER_ASSIGNED)]
        assert "Listener Exploding failed" in caplog.text


class TestDriverAndRider:
    def test_driver_update_location(self):
        driver = make_driver()
        driver.update_location(Location(1.0, 2.0))
        assert driver.location == Location(1.0, 2.0)

    def test_driver_set_rating(self):
        driver = make_driver(rating=4.0)
        driver.set_rating(4.6)
        assert driver.rating == 4.6

    @pytest.mark.parametrize("rating", [-0.1, 5.1])
    def test_driver_rating_out_of_range(self, rating):
        driver = make_driver(rating=4.0)
        with pytest.raises(InvalidConfiguration):
            driver.set_rating(rating)
        assert driver.rating == 4.0

    def test_rider_update_location(self):
        rider = make_rider()
        rider.update_location(Location(12.97, 77.59))
        assert rider.location == Location(12.97, 77.59)


class TestRideFactory:
    def test_ids_are_unique_and_increasing(self):
        factory = RideFactory()
        request = RideRequest(
            make_rider(), Location(0, 0), Location(1, 1), VehicleType.SEDAN
        )
        ids = [factory.create(request).id for _ in range(5)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 5

    def test_factory_copies_request(self):
        rider = make_rider()
        request = RideRequest(rider, Location(0, 0), Location(0, 0.1), VehicleType.SUV)
        ride = RideFactory().create(request)
        assert ride.rider is rider
        assert ride.vehicle_type == VehicleType.SUV
        assert ride.status == RideStatus.REQUESTED
