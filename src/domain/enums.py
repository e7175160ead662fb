"""Domain enumerations and state-transition rules."""

import enum


class SubscriptionType(str, enum.Enum):
    SELLER = "seller"
    BUYER = "buyer"


class SubscriptionStatus(str, enum.Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    INACTIVE = "inactive"


# State machine: maps current status -> set of valid next statuses.
# Renewing an active subscription restarts its billing period.
SUBSCRIPTION_TRANSITIONS: dict[SubscriptionStatus, set[SubscriptionStatus]] = {
    SubscriptionStatus.TRIAL: {SubscriptionStatus.ACTIVE, SubscriptionStatus.INACTIVE},
    SubscriptionStatus.ACTIVE: {SubscriptionStatus.ACTIVE, SubscriptionStatus.INACTIVE},
    SubscriptionStatus.INACTIVE: {SubscriptionStatus.ACTIVE},
}

# Statuses that grant access while end_date is still in the future
USABLE_STATUSES = frozenset({SubscriptionStatus.TRIAL, SubscriptionStatus.ACTIVE})


class PaymentStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"


class SellerStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class BusinessType(str, enum.Enum):
    INDIVIDUAL = "individual"
    REGISTERED = "registered"


class DocumentType(str, enum.Enum):
    GSTIN = "GSTIN"
    AADHAR = "Aadhar"
    PAN = "PAN"
    BUSINESS_LICENSE = "BusinessLicense"


class VehicleType(str, enum.Enum):
    BICYCLE = "bicycle"
    MOTORCYCLE = "motorcycle"
    CAR = "car"
    TRUCK = "truck"
