#!/usr/bin/env python
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from losreport.data import load_data, validate_dataset
from losreport.data.validators import print_validation_report
from losreport.features.build_features import stay_midpoint

path = sys.argv[1] if len(sys.argv) > 1 else None
df = load_data(path, validate=False)

report = validate_dataset(df)
print_validation_report(report)

if not report.is_valid:
    sys.exit(1)

print()
print('=== STAY BUCKETS ===')
counts = df['Stay_Days'].value_counts()
for bucket, count in counts.items():
    print(f'  {bucket:>20}: {count:>7}  (midpoint {stay_midpoint(bucket):g})')

print()
print('=== BED GRADE ===')
missing = df['Bed_Grade'].isna().sum()
print('Missing bed grades:', missing)
print('Observed mean (full data):', round(df['Bed_Grade'].mean(), 4))
print('The report imputes with the training-subset mean, not this value.')

print()
print('=== SUMMARY ===')
print('All admission records validated successfully!')
