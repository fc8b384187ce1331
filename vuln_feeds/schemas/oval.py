"""
OVAL Definitions Schema

OBJECTIVE:
Typed representation of an OVAL definitions document as published by the
Oracle, SUSE and Ubuntu security portals. The mapping is permissive: any
element or attribute that is missing decodes to its zero value ("" for text,
[] for repeated elements, None for an absent criteria tree). Unknown elements
are ignored.

STRUCTURE:
- OvalDefinitions: generator, namespace declarations, definitions, tests, objects, states
- Definition: id/version/class, Metadata, recursive Criteria tree
- Criteria: operator node with ordered children (Criteria, Criterion, ExtendDefinition)
- OvalTest / OvalObject / OvalState: what is checked (package name, evr, arch, ...)

The document can be turned back into a plain dict for JSON output (to_dict) and
re-serialized as OVAL XML (to_xml) with the original namespace prefixes.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
OVAL_COMMON_NS = "http://oval.mitre.org/XMLSchema/oval-common-5"
OVAL_DEFINITIONS_NS = "http://oval.mitre.org/XMLSchema/oval-definitions-5"

# Criteria trees deeper than this get a debug line when decoded
LEGACY_CRITERIA_DEPTH = 3


def _local(tag: str) -> str:
    """Strip the {namespace} part of an ElementTree tag"""
    return tag.rsplit('}', 1)[-1]


def _namespace(tag: str) -> str:
    if tag.startswith('{'):
        return tag[1:].split('}', 1)[0]
    return ''


def _child(elem: ET.Element, name: str) -> Optional[ET.Element]:
    for child in elem:
        if isinstance(child.tag, str) and _local(child.tag) == name:
            return child
    return None


def _children(elem: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in elem if isinstance(child.tag, str) and _local(child.tag) == name]


def _text(elem: Optional[ET.Element]) -> str:
    if elem is None:
        return ""
    return elem.text or ""


def _attr(elem: Optional[ET.Element], name: str) -> str:
    if elem is None:
        return ""
    return elem.get(name, "")


@dataclass
class Generator:
    product_name: str = ""
    product_version: str = ""
    schema_version: str = ""
    timestamp: str = ""

    @classmethod
    def from_element(cls, elem: Optional[ET.Element]) -> "Generator":
        if elem is None:
            return cls()
        return cls(
            product_name=_text(_child(elem, 'product_name')),
            product_version=_text(_child(elem, 'product_version')),
            schema_version=_text(_child(elem, 'schema_version')),
            timestamp=_text(_child(elem, 'timestamp')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_name': self.product_name,
            'product_version': self.product_version,
            'schema_version': self.schema_version,
            'timestamp': self.timestamp,
        }


@dataclass
class Affected:
    family: str = ""
    platforms: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'family': self.family, 'platforms': list(self.platforms)}


@dataclass
class Reference:
    source: str = ""
    ref_id: str = ""
    ref_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'source': self.source, 'ref_id': self.ref_id, 'ref_url': self.ref_url}


@dataclass
class AdvisoryCve:
    """A <cve> entry of a vendor advisory block"""
    cve_id: str = ""
    href: str = ""
    impact: str = ""
    cvss3: str = ""
    public: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cve_id': self.cve_id,
            'href': self.href,
            'impact': self.impact,
            'cvss3': self.cvss3,
            'public': self.public,
        }


@dataclass
class Advisory:
    """Vendor <advisory> block (severity, rights, issue dates, CVEs)"""
    severity: str = ""
    rights: str = ""
    issued: str = ""
    updated: str = ""
    cves: List[AdvisoryCve] = field(default_factory=list)

    @classmethod
    def from_element(cls, elem: Optional[ET.Element]) -> "Advisory":
        if elem is None:
            return cls()
        return cls(
            severity=_text(_child(elem, 'severity')),
            rights=_text(_child(elem, 'rights')),
            issued=_attr(_child(elem, 'issued'), 'date'),
            updated=_attr(_child(elem, 'updated'), 'date'),
            cves=[
                AdvisoryCve(
                    cve_id=_text(cve),
                    href=cve.get('href', ''),
                    impact=cve.get('impact', ''),
                    cvss3=cve.get('cvss3', ''),
                    public=cve.get('public', ''),
                )
                for cve in _children(elem, 'cve')
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'severity': self.severity,
            'rights': self.rights,
            'issued': self.issued,
            'updated': self.updated,
            'cves': [cve.to_dict() for cve in self.cves],
        }


@dataclass
class Metadata:
    title: str = ""
    affected: Affected = field(default_factory=Affected)
    references: List[Reference] = field(default_factory=list)
    description: str = ""
    advisory: Advisory = field(default_factory=Advisory)

    @classmethod
    def from_element(cls, elem: Optional[ET.Element]) -> "Metadata":
        if elem is None:
            return cls()
        affected = _child(elem, 'affected')
        return cls(
            title=_text(_child(elem, 'title')),
            affected=Affected(
                family=_attr(affected, 'family'),
                platforms=[_text(p) for p in _children(affected, 'platform')] if affected is not None else [],
            ),
            references=[
                Reference(
                    source=ref.get('source', ''),
                    ref_id=ref.get('ref_id', ''),
                    ref_url=ref.get('ref_url', ''),
                )
                for ref in _children(elem, 'reference')
            ],
            description=_text(_child(elem, 'description')),
            advisory=Advisory.from_element(_child(elem, 'advisory')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'affected': self.affected.to_dict(),
            'references': [ref.to_dict() for ref in self.references],
            'description': self.description,
            'advisory': self.advisory.to_dict(),
        }


@dataclass
class Criterion:
    """Leaf of a criteria tree pointing at a test"""
    test_ref: str = ""
    comment: str = ""
    negate: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'test_ref': self.test_ref, 'comment': self.comment, 'negate': self.negate}


@dataclass
class ExtendDefinition:
    """Leaf of a criteria tree pointing at another definition"""
    definition_ref: str = ""
    comment: str = ""
    negate: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'definition_ref': self.definition_ref, 'comment': self.comment, 'negate': self.negate}


@dataclass
class Criteria:
    """AND/OR node; children keep document order and nest to any depth"""
    operator: str = ""
    comment: str = ""
    negate: str = ""
    children: List[Union["Criteria", Criterion, ExtendDefinition]] = field(default_factory=list)

    @classmethod
    def from_element(cls, elem: ET.Element) -> "Criteria":
        node = cls(
            operator=elem.get('operator', ''),
            comment=elem.get('comment', ''),
            negate=elem.get('negate', ''),
        )
        for child in elem:
            if not isinstance(child.tag, str):
                continue
            name = _local(child.tag)
            if name == 'criteria':
                node.children.append(Criteria.from_element(child))
            elif name == 'criterion':
                node.children.append(Criterion(
                    test_ref=child.get('test_ref', ''),
                    comment=child.get('comment', ''),
                    negate=child.get('negate', ''),
                ))
            elif name == 'extend_definition':
                node.children.append(ExtendDefinition(
                    definition_ref=child.get('definition_ref', ''),
                    comment=child.get('comment', ''),
                    negate=child.get('negate', ''),
                ))
        return node

    def depth(self) -> int:
        """Number of nested criteria levels, this node included"""
        nested = [child.depth() for child in self.children if isinstance(child, Criteria)]
        return 1 + max(nested, default=0)

    def test_refs(self) -> List[str]:
        """All test references of the tree in document order"""
        refs = []
        for child in self.children:
            if isinstance(child, Criteria):
                refs.extend(child.test_refs())
            elif isinstance(child, Criterion):
                refs.append(child.test_ref)
        return refs

    def to_dict(self) -> Dict[str, Any]:
        children = []
        for child in self.children:
            if isinstance(child, Criteria):
                children.append({'criteria': child.to_dict()})
            elif isinstance(child, Criterion):
                children.append({'criterion': child.to_dict()})
            else:
                children.append({'extend_definition': child.to_dict()})
        return {
            'operator': self.operator,
            'comment': self.comment,
            'negate': self.negate,
            'children': children,
        }


@dataclass
class Definition:
    id: str = ""
    version: str = ""
    class_: str = ""
    metadata: Metadata = field(default_factory=Metadata)
    criteria: Optional[Criteria] = None

    @classmethod
    def from_element(cls, elem: ET.Element) -> "Definition":
        criteria_elem = _child(elem, 'criteria')
        definition = cls(
            id=elem.get('id', ''),
            version=elem.get('version', ''),
            class_=elem.get('class', ''),
            metadata=Metadata.from_element(_child(elem, 'metadata')),
            criteria=Criteria.from_element(criteria_elem) if criteria_elem is not None else None,
        )
        if definition.criteria is not None and definition.criteria.depth() > LEGACY_CRITERIA_DEPTH:
            logger.debug(
                f"Definition {definition.id} has a criteria tree {definition.criteria.depth()} "
                f"levels deep with {len(definition.criteria.test_refs())} test references "
                f"(legacy limit {LEGACY_CRITERIA_DEPTH})"
            )
        return definition

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'version': self.version,
            'class': self.class_,
            'metadata': self.metadata.to_dict(),
            'criteria': self.criteria.to_dict() if self.criteria is not None else None,
        }


@dataclass
class OvalEntity:
    """Child element of an object or state, e.g. <name>, <evr>, <arch>"""
    name: str = ""
    value: str = ""
    operation: str = ""
    datatype: str = ""
    var_ref: str = ""

    @classmethod
    def from_element(cls, elem: ET.Element) -> "OvalEntity":
        return cls(
            name=_local(elem.tag),
            value=_text(elem),
            operation=elem.get('operation', ''),
            datatype=elem.get('datatype', ''),
            var_ref=elem.get('var_ref', ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'value': self.value,
            'operation': self.operation,
            'datatype': self.datatype,
            'var_ref': self.var_ref,
        }


@dataclass
class OvalTest:
    kind: str = ""
    namespace: str = ""
    id: str = ""
    version: str = ""
    comment: str = ""
    check: str = ""
    check_existence: str = ""
    object_ref: str = ""
    state_refs: List[str] = field(default_factory=list)

    @classmethod
    def from_element(cls, elem: ET.Element) -> "OvalTest":
        return cls(
            kind=_local(elem.tag),
            namespace=_namespace(elem.tag),
            id=elem.get('id', ''),
            version=elem.get('version', ''),
            comment=elem.get('comment', ''),
            check=elem.get('check', ''),
            check_existence=elem.get('check_existence', ''),
            object_ref=_attr(_child(elem, 'object'), 'object_ref'),
            state_refs=[state.get('state_ref', '') for state in _children(elem, 'state')],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'namespace': self.namespace,
            'id': self.id,
            'version': self.version,
            'comment': self.comment,
            'check': self.check,
            'check_existence': self.check_existence,
            'object_ref': self.object_ref,
            'state_refs': list(self.state_refs),
        }


@dataclass
class OvalObject:
    kind: str = ""
    namespace: str = ""
    id: str = ""
    version: str = ""
    entities: List[OvalEntity] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Package name checked by the object, when it has a <name> entity"""
        for entity in self.entities:
            if entity.name == 'name':
                return entity.value
        return ""

    @classmethod
    def from_element(cls, elem: ET.Element) -> "OvalObject":
        return cls(
            kind=_local(elem.tag),
            namespace=_namespace(elem.tag),
            id=elem.get('id', ''),
            version=elem.get('version', ''),
            entities=[OvalEntity.from_element(child) for child in elem if isinstance(child.tag, str)],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'namespace': self.namespace,
            'id': self.id,
            'version': self.version,
            'name': self.name,
            'entities': [entity.to_dict() for entity in self.entities],
        }


@dataclass
class OvalState:
    kind: str = ""
    namespace: str = ""
    id: str = ""
    version: str = ""
    entities: List[OvalEntity] = field(default_factory=list)

    @classmethod
    def from_element(cls, elem: ET.Element) -> "OvalState":
        return cls(
            kind=_local(elem.tag),
            namespace=_namespace(elem.tag),
            id=elem.get('id', ''),
            version=elem.get('version', ''),
            entities=[OvalEntity.from_element(child) for child in elem if isinstance(child.tag, str)],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'namespace': self.namespace,
            'id': self.id,
            'version': self.version,
            'entities': [entity.to_dict() for entity in self.entities],
        }


@dataclass
class OvalDefinitions:
    """One decoded OVAL definitions document"""
    schema_location: str = ""
    namespaces: Dict[str, str] = field(default_factory=dict)
    generator: Generator = field(default_factory=Generator)
    definitions: List[Definition] = field(default_factory=list)
    tests: List[OvalTest] = field(default_factory=list)
    objects: List[OvalObject] = field(default_factory=list)
    states: List[OvalState] = field(default_factory=list)

    @classmethod
    def from_element(cls, root: ET.Element, namespaces: Dict[str, str] = None) -> "OvalDefinitions":
        """
        Map an <oval_definitions> element onto the schema

        Args:
            root: Parsed document root
            namespaces: Prefix to URI declarations seen on the root element
        """
        definitions = _child(root, 'definitions')
        tests = _child(root, 'tests')
        objects = _child(root, 'objects')
        states = _child(root, 'states')
        return cls(
            schema_location=root.get(f'{{{XSI_NS}}}schemaLocation', ''),
            namespaces=dict(namespaces or {}),
            generator=Generator.from_element(_child(root, 'generator')),
            definitions=[Definition.from_element(d) for d in _children(definitions, 'definition')] if definitions is not None else [],
            tests=[OvalTest.from_element(t) for t in tests if isinstance(t.tag, str)] if tests is not None else [],
            objects=[OvalObject.from_element(o) for o in objects if isinstance(o.tag, str)] if objects is not None else [],
            states=[OvalState.from_element(s) for s in states if isinstance(s.tag, str)] if states is not None else [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'schema_location': self.schema_location,
            'namespaces': dict(self.namespaces),
            'generator': self.generator.to_dict(),
            'definitions': [d.to_dict() for d in self.definitions],
            'tests': [t.to_dict() for t in self.tests],
            'objects': [o.to_dict() for o in self.objects],
            'states': [s.to_dict() for s in self.states],
        }

    def to_xml(self, indent: str = "    ") -> bytes:
        """Re-serialize the document as indented OVAL XML"""
        return OvalXmlWriter(self.namespaces).write(self, indent)


class OvalXmlWriter:
    """
    Builds OVAL XML from an OvalDefinitions document

    Tags are written with literal prefixes taken from the document's own
    namespace declarations, so the output keeps the vendor's prefixes without
    touching ElementTree's process-wide namespace registry.
    """

    def __init__(self, namespaces: Dict[str, str]):
        self.namespaces = dict(namespaces)
        self.default_ns = self.namespaces.get('', OVAL_DEFINITIONS_NS)
        self.prefixes = {uri: prefix for prefix, uri in self.namespaces.items() if prefix}

    def _element(self, parent: Optional[ET.Element], namespace: str, name: str,
                 attrib: Dict[str, str] = None, text: str = "") -> ET.Element:
        attrs = {k: v for k, v in (attrib or {}).items() if v}
        if not namespace or namespace == self.default_ns:
            tag = name
        elif namespace in self.prefixes:
            tag = f"{self.prefixes[namespace]}:{name}"
        else:
            tag = name
            attrs = {'xmlns': namespace, **attrs}
        elem = ET.Element(tag, attrs) if parent is None else ET.SubElement(parent, tag, attrs)
        if text:
            elem.text = text
        return elem

    def _criteria(self, parent: ET.Element, node: Criteria) -> None:
        elem = self._element(parent, self.default_ns, 'criteria', {
            'operator': node.operator, 'comment': node.comment, 'negate': node.negate,
        })
        for child in node.children:
            if isinstance(child, Criteria):
                self._criteria(elem, child)
            elif isinstance(child, Criterion):
                self._element(elem, self.default_ns, 'criterion', {
                    'test_ref': child.test_ref, 'comment': child.comment, 'negate': child.negate,
                })
            else:
                self._element(elem, self.default_ns, 'extend_definition', {
                    'definition_ref': child.definition_ref, 'comment': child.comment, 'negate': child.negate,
                })

    def _definition(self, parent: ET.Element, definition: Definition) -> None:
        ns = self.default_ns
        elem = self._element(parent, ns, 'definition', {
            'id': definition.id, 'version': definition.version, 'class': definition.class_,
        })
        meta = definition.metadata
        meta_elem = self._element(elem, ns, 'metadata')
        self._element(meta_elem, ns, 'title', text=meta.title)
        affected = self._element(meta_elem, ns, 'affected', {'family': meta.affected.family})
        for platform in meta.affected.platforms:
            self._element(affected, ns, 'platform', text=platform)
        for ref in meta.references:
            self._element(meta_elem, ns, 'reference', {
                'source': ref.source, 'ref_id': ref.ref_id, 'ref_url': ref.ref_url,
            })
        self._element(meta_elem, ns, 'description', text=meta.description)
        advisory = meta.advisory
        if advisory != Advisory():
            adv_elem = self._element(meta_elem, ns, 'advisory')
            if advisory.severity:
                self._element(adv_elem, ns, 'severity', text=advisory.severity)
            if advisory.rights:
                self._element(adv_elem, ns, 'rights', text=advisory.rights)
            if advisory.issued:
                self._element(adv_elem, ns, 'issued', {'date': advisory.issued})
            if advisory.updated:
                self._element(adv_elem, ns, 'updated', {'date': advisory.updated})
            for cve in advisory.cves:
                self._element(adv_elem, ns, 'cve', {
                    'href': cve.href, 'impact': cve.impact, 'cvss3': cve.cvss3, 'public': cve.public,
                }, text=cve.cve_id)
        if definition.criteria is not None:
            self._criteria(elem, definition.criteria)

    def write(self, document: OvalDefinitions, indent: str = "    ") -> bytes:
        attrs = {}
        for prefix, uri in self.namespaces.items():
            attrs['xmlns' if not prefix else f'xmlns:{prefix}'] = uri
        if '' not in self.namespaces:
            attrs['xmlns'] = self.default_ns
        if document.schema_location:
            xsi_prefix = self.prefixes.get(XSI_NS)
            if xsi_prefix is None:
                xsi_prefix = 'xsi'
                attrs['xmlns:xsi'] = XSI_NS
            attrs[f'{xsi_prefix}:schemaLocation'] = document.schema_location

        root = ET.Element('oval_definitions', attrs)

        generator = self._element(root, self.default_ns, 'generator')
        common = OVAL_COMMON_NS if OVAL_COMMON_NS in self.prefixes else self.default_ns
        for name, value in document.generator.to_dict().items():
            if value:
                self._element(generator, common, name, text=value)

        definitions = self._element(root, self.default_ns, 'definitions')
        for definition in document.definitions:
            self._definition(definitions, definition)

        tests = self._element(root, self.default_ns, 'tests')
        for test in document.tests:
            elem = self._element(tests, test.namespace, test.kind, {
                'id': test.id, 'version': test.version, 'comment': test.comment,
                'check': test.check, 'check_existence': test.check_existence,
            })
            if test.object_ref:
                self._element(elem, test.namespace, 'object', {'object_ref': test.object_ref})
            for state_ref in test.state_refs:
                self._element(elem, test.namespace, 'state', {'state_ref': state_ref})

        for section, items in (('objects', document.objects), ('states', document.states)):
            section_elem = self._element(root, self.default_ns, section)
            for item in items:
                elem = self._element(section_elem, item.namespace, item.kind, {
                    'id': item.id, 'version': item.version,
                })
                for entity in item.entities:
                    self._element(elem, item.namespace, entity.name, {
                        'operation': entity.operation, 'datatype': entity.datatype,
                        'var_ref': entity.var_ref,
                    }, text=entity.value)

        ET.indent(root, space=indent)
        return ET.tostring(root, encoding='utf-8', xml_declaration=True)
