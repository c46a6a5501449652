"""Domain layer for chargelog application."""

from chargelog.domain.charging import ChargingRecordService
from chargelog.domain.vehicle import VehicleService
from chargelog.domain.maintenance import MaintenanceService
from chargelog.domain.station import StationService
from chargelog.domain.statistics import StatisticsService
from chargelog.domain.csv_transfer import ChargingCSVService, MaintenanceCSVService

__all__ = [
    "ChargingRecordService",
    "VehicleService",
    "MaintenanceService",
    "StationService",
    "StatisticsService",
    "ChargingCSVService",
    "MaintenanceCSVService",
]
