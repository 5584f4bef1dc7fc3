"""
Frontmatter schema data

The subset of the documentation frontmatter schema that docscheck validates:
known top-level fields with their expected types, the applies_to key space and
the products, whose ids are accepted in `products` and whose display names
are built-in `product.<id>` substitutions.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class FieldSchema:
    """
    Expected shape of a top-level frontmatter field

    Attributes:
        type: One of "string", "array", "object"
        enum: Allowed values, when restricted
        max_length: Maximum string length, when limited
    """
    type: str
    enum: Optional[Tuple[str, ...]] = None
    max_length: Optional[int] = None


FRONTMATTER_FIELDS: Dict[str, FieldSchema] = {
    'title': FieldSchema(type='string'),
    'description': FieldSchema(type='string', max_length=200),
    'navigation_title': FieldSchema(type='string'),
    'sub': FieldSchema(type='object'),
    'layout': FieldSchema(type='string', enum=('landing-page', 'not-found', 'archive')),
    'applies_to': FieldSchema(type='object'),
    'mapped_pages': FieldSchema(type='array'),
    'products': FieldSchema(type='array'),
}

DEPLOYMENT_KEYS: Tuple[str, ...] = ('self', 'ece', 'eck', 'ess')

SERVERLESS_KEYS: Tuple[str, ...] = ('elasticsearch', 'observability', 'security')

PRODUCT_KEYS: Tuple[str, ...] = (
    'ecctl', 'curator',
    'apm_agent_android', 'apm_agent_dotnet', 'apm_agent_go', 'apm_agent_ios',
    'apm_agent_java', 'apm_agent_node', 'apm_agent_php', 'apm_agent_python',
    'apm_agent_ruby', 'apm_agent_rum',
    'edot_ios', 'edot_android', 'edot_dotnet', 'edot_java', 'edot_node',
    'edot_php', 'edot_python', 'edot_cf_aws', 'edot_cf_azure', 'edot_cf_gcp',
    'edot_collector',
)

# Every key the applies_to parser recognises, at any level
APPLIES_KEYS: Tuple[str, ...] = (
    ('stack', 'deployment', 'serverless', 'product')
    + DEPLOYMENT_KEYS
    + SERVERLESS_KEYS
    + PRODUCT_KEYS
)

# Valid children of the nested applies_to keys; parents not listed here are not checked
NESTED_APPLIES_KEYS: Dict[str, Tuple[str, ...]] = {
    'deployment': DEPLOYMENT_KEYS,
    'serverless': SERVERLESS_KEYS,
    'product': PRODUCT_KEYS + DEPLOYMENT_KEYS + SERVERLESS_KEYS,
}

# Product identifier to display name; ids are valid in `products` and each
# name is also a `product.<id>` substitution
PRODUCTS: Dict[str, str] = {
    'apm': 'APM',
    'apm-agent': 'APM Agent',
    'apm-agent-dotnet': 'APM .NET Agent',
    'apm-agent-go': 'APM Go Agent',
    'apm-agent-java': 'APM Java Agent',
    'apm-agent-node': 'APM Node.js Agent',
    'apm-agent-php': 'APM PHP Agent',
    'apm-agent-python': 'APM Python Agent',
    'apm-agent-ruby': 'APM Ruby Agent',
    'apm-agent-rum-js': 'APM RUM JavaScript Agent',
    'apm-k8s-attacher': 'APM Attacher for Kubernetes',
    'apm-aws-lambda': 'APM AWS Lambda extension',
    'apm-server': 'APM Server',
    'auditbeat': 'Auditbeat',
    'beats': 'Beats',
    'cloud-control-ecctl': 'Elastic Cloud Control',
    'cloud-enterprise': 'Elastic Cloud Enterprise',
    'cloud-hosted': 'Elastic Cloud Hosted',
    'cloud-kubernetes': 'Elastic Cloud on Kubernetes',
    'cloud-serverless': 'Elastic Cloud Serverless',
    'cloud-terraform': 'Elastic Cloud Terraform Provider',
    'curator': 'Elasticsearch Curator',
    'ecs': 'Elastic Common Schema (ECS)',
    'ecs-logging': 'ECS Logging',
    'ecs-dotnet': 'ECS Logging .NET',
    'ecs-logging-go-logrus': 'ECS Logging Go (Logrus)',
    'ecs-logging-go-zap': 'ECS Logging Go (Zap)',
    'ecs-logging-go-zerolog': 'ECS Logging Go (Zerolog)',
    'ecs-logging-java': 'ECS Logging Java',
    'ecs-logging-nodejs': 'ECS Logging Node.js',
    'ecs-logging-php': 'ECS Logging PHP',
    'ecs-logging-python': 'ECS Logging Python',
    'ecs-logging-ruby': 'ECS Logging Ruby',
    'edot-cf': 'EDOT Cloud Forwarder',
    'edot-sdk': 'Elastic Distribution of OpenTelemetry SDK',
    'edot-collector': 'Elastic Distribution of OpenTelemetry Collector',
    'edot-ios': 'Elastic Distribution of OpenTelemetry iOS',
    'edot-android': 'Elastic Distribution of OpenTelemetry Android',
    'edot-dotnet': 'Elastic Distribution of OpenTelemetry .NET',
    'edot-java': 'Elastic Distribution of OpenTelemetry Java',
    'edot-node': 'Elastic Distribution of OpenTelemetry Node',
    'edot-php': 'Elastic Distribution of OpenTelemetry PHP',
    'edot-python': 'Elastic Distribution of OpenTelemetry Python',
    'edot-cf-aws': 'EDOT Cloud Forwarder for AWS',
    'edot-cf-azure': 'EDOT Cloud Forwarder for Azure',
    'eland': 'Eland',
    'elastic-agent': 'Elastic Agent',
    'elastic-serverless-forwarder': 'Elastic Serverless Forwarder',
    'elastic-stack': 'Elastic Stack',
    'elasticsearch': 'Elasticsearch',
    'elasticsearch-client': 'Elasticsearch Client',
    'ess': 'Elastic Cloud Hosted',
    'filebeat': 'Filebeat',
    'fleet': 'Fleet',
    'heartbeat': 'Heartbeat',
    'integrations': 'Elastic integrations',
    'kibana': 'Kibana',
    'logstash': 'Logstash',
    'machine-learning': 'Machine Learning',
    'metricbeat': 'Metricbeat',
    'observability': 'Elastic Observability',
    'packetbeat': 'Packetbeat',
    'painless': 'Painless',
    'search-ui': 'Search UI',
    'security': 'Elastic Security',
    'self': 'Self-managed Elastic',
    'serverless-elasticsearch': 'Elasticsearch Serverless',
    'serverless-observability': 'Elastic Observability Serverless',
    'serverless-security': 'Elastic Security Serverless',
    'winlogbeat': 'Winlogbeat',
}

PRODUCT_IDS: FrozenSet[str] = frozenset(PRODUCTS)
