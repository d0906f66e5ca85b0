"""Shared fixtures for barn file tests."""

import pytest

BARN_YAML = """
state:
  asOfDate: '2025-04-01'

horses:
  - id: h-whiskey
    name: Whiskey
    ownerName: Jane
    isClipped: false
    dateAdded: '2024-01-01'
    feedSchedule:
      amGrain: 2 qt Senior
      amHay: 2 flakes
      amSupplements: [SmartPak, Biotin]
      amFedToday: true
      amFedAt: '2025-04-01T07:30:00'
      pmGrain: 1 qt Senior
      pmHay: 3 flakes
      pmSupplements: [Biotin]
      pmMedications: [Bute]
      specialInstructions: Soak hay
    events:
      - category: Farrier
        date: '2025-01-01'
      - category: Farrier
        date: '2025-02-19'
        nextDueDate: '2025-04-09'
        cost: 180.0
        providerName: Sam
        notes: Front shoes reset
  - id: h-pepper
    name: Pepper
    ownerName: Tom
    isClipped: true
    events:
      - category: Vet
        date: '2024-09-18'
        nextDueDate: '2025-03-18'
        cost: 250.0

feedTemplates:
  - name: Easy keeper
    description: Hay only
    amHay: 2 flakes
    pmHay: 2 flakes
    createdOn: '2025-01-15'
    usageCount: 2
"""


@pytest.fixture
def barn_file(tmp_path):
    path = tmp_path / "barn.yaml"
    path.write_text(BARN_YAML)
    return path
