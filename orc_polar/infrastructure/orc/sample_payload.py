"""
Canned DownBoatRMS response used by mock mode and tests.

Trimmed to the fields the service reads. Values are seconds per nautical
mile (angles in degrees), as ORC publishes them, for a mid-size cruiser-racer.
"""

SAMPLE_REF_NO = "034200028W9"

SAMPLE_ORC_PAYLOAD = {
    "rms": [
        {
            "RefNo": SAMPLE_REF_NO,
            "SailNo": "DEN-13",
            "YachtName": "Mock Boat",
            "Allowances": {
                "WindSpeeds": [6, 8, 10, 12, 14, 16, 20],
                "BeatAngle": [44.2, 42.6, 41.1, 40.0, 39.4, 39.1, 39.3],
                "Beat": [1000.0, 837.2, 750.0, 705.9, 679.2, 666.7, 654.5],
                "GybeAngle": [142.0, 146.3, 150.5, 156.2, 166.1, 171.8, 176.0],
                "Run": [923.1, 750.0, 642.9, 580.6, 537.3, 500.0, 450.0],
                "R52": [642.9, 562.5, 521.7, 500.0, 493.2, 486.5, 480.0],
                "R60": [610.2, 537.3, 507.0, 486.5, 480.0, 473.7, 467.5],
                "R75": [590.2, 521.7, 493.2, 473.7, 461.5, 455.7, 444.4],
                "R90": [600.0, 521.7, 486.5, 467.5, 450.0, 439.0, 423.5],
                "R110": [610.2, 521.7, 480.0, 455.7, 439.0, 418.6, 391.3],
                "R120": [642.9, 537.3, 493.2, 461.5, 439.0, 418.6, 383.0],
                "R135": [734.7, 600.0, 529.4, 493.2, 461.5, 433.7, 387.1],
                "R150": [878.0, 705.9, 600.0, 529.4, 493.2, 467.5, 418.6],
            },
        }
    ]
}
