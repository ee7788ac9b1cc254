# This file marks the services package for API calculation services.
