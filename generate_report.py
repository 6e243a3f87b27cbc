import json
from unwrapped_stats.config import settings
from unwrapped_stats.stats import StatsGenerator

# Create generator instance
generator = StatsGenerator(settings)

# Generate report
report = generator.generate()

# Print results
print(json.dumps(report.to_json_dict(), indent=2, ensure_ascii=False))
