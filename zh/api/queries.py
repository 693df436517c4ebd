"""GraphQL query and mutation documents."""

LIST_WORKSPACES = """query ListWorkspaces {
  viewer {
    zenhubOrganizations(first: 50) {
      nodes {
        id
        name
        workspaces(first: 100) {
          nodes {
            id
            name
            displayName
          }
        }
      }
    }
  }
}"""

LIST_PIPELINES = """query ListPipelines($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    pipelinesConnection(first: $first, after: $after) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        id
        name
      }
    }
  }
}"""

LIST_ZENHUB_EPICS = """query ListZenhubEpics($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    zenhubEpics(first: $first, after: $after) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        id
        title
      }
    }
  }
}"""

LIST_ROADMAP_EPICS = """query ListRoadmapEpics($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    roadmap {
      items(first: $first, after: $after) {
        pageInfo {
          hasNextPage
          endCursor
        }
        nodes {
          __typename
          ... on ZenhubEpic {
            id
            title
          }
          ... on Epic {
            id
            issue {
              title
              number
              repository {
                name
                ownerName
              }
            }
          }
        }
      }
    }
  }
}"""

LIST_SPRINTS = """query ListSprints($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    sprints(first: $first, after: $after, orderBy: {field: START_AT, direction: DESC}) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        id
        name
        generatedName
        state
        startAt
        endAt
      }
    }
    activeSprint {
      id
    }
    upcomingSprint {
      id
    }
    previousSprint {
      id
    }
  }
}"""

LIST_REPOS = """query ListRepos($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    repositoriesConnection(first: $first, after: $after) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        id
        ghId
        name
        ownerName
      }
    }
  }
}"""

LIST_LABELS = """query GetWorkspaceLabels($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    repositoriesConnection(first: $first, after: $after) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        labels(first: 100) {
          nodes {
            id
            name
            color
          }
        }
      }
    }
  }
}"""

LIST_ZENHUB_LABELS = """query ListZenhubLabels($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    zenhubLabels(first: $first, after: $after) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        id
        name
        color
      }
    }
  }
}"""

LIST_PRIORITIES = """query GetWorkspacePriorities($workspaceId: ID!) {
  workspace(id: $workspaceId) {
    prioritiesConnection {
      nodes {
        id
        name
        color
        description
      }
    }
  }
}"""

LIST_USERS = """query ListZenhubUsers($workspaceId: ID!, $first: Int!, $after: String) {
  workspace(id: $workspaceId) {
    zenhubUsers(first: $first, after: $after) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        id
        name
        githubUser { login }
      }
    }
  }
}"""

ISSUE_BY_INFO = """query IssueByInfo($repositoryGhId: Int!, $issueNumber: Int!) {
  issueByInfo(repositoryGhId: $repositoryGhId, issueNumber: $issueNumber) {
    id
    number
    repository {
      ghId
      name
      ownerName
    }
  }
}"""

ISSUE_BY_NODE = """query IssueByNode($id: ID!) {
  node(id: $id) {
    ... on Issue {
      id
      number
      repository {
        ghId
        name
        ownerName
      }
    }
  }
}"""

WORKSPACE_ORGANIZATION = """query WorkspaceOrganization($workspaceId: ID!) {
  workspace(id: $workspaceId) {
    zenhubOrganization {
      id
    }
  }
}"""

CREATE_PIPELINE = """mutation CreatePipeline($input: CreatePipelineInput!) {
  createPipeline(input: $input) {
    pipeline {
      id
      name
    }
  }
}"""

UPDATE_PIPELINE = """mutation UpdatePipeline($input: UpdatePipelineInput!) {
  updatePipeline(input: $input) {
    pipeline {
      id
      name
    }
  }
}"""

DELETE_PIPELINE = """mutation DeletePipeline($input: DeletePipelineInput!) {
  deletePipeline(input: $input) {
    destinationPipeline {
      id
      name
    }
  }
}"""

CREATE_ZENHUB_EPIC = """mutation CreateZenhubEpic($input: CreateZenhubEpicInput!) {
  createZenhubEpic(input: $input) {
    zenhubEpic {
      id
      title
    }
  }
}"""

GITHUB_PR_BY_BRANCH = """query PRByBranch($owner: String!, $repo: String!, $head: String!) {
  repository(owner: $owner, name: $repo) {
    pullRequests(headRefName: $head, first: 1, states: [OPEN, CLOSED, MERGED]) {
      nodes {
        number
      }
    }
  }
}"""
